"""HTTP 上传接口（FastAPI）。

- GET  /        : 存活检查用的问候
- GET  /health  : 健康检查
- POST /upload  : multipart 字段 image，返回模型识别结果
"""

from __future__ import annotations

import sys
from typing import Optional

from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tablemap_core.api.service import analyze_image
from tablemap_core.config.settings import settings
from tablemap_core.domain.exceptions import BusinessError
from tablemap_core.domain.models import DEFAULT_IMAGE_MIME
from tablemap_core.infrastructure.logging.logger import logger


app = FastAPI(
    title="Tablemap",
    version="0.1.0",
    description="Restaurant floor-plan recognition via a multimodal LLM.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["Origin", "Content-Type"],
    allow_credentials=True,
    max_age=12 * 60 * 60,
)


@app.get("/")
def home():
    return {"message": "Hello, World!"}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/upload")
def upload(image: Optional[UploadFile] = File(None)):
    """
    接收一张平面图并返回模型的 JSON 文本。

    同步处理函数，FastAPI 会放到线程池里执行阻塞的模型调用。
    """
    if image is None:
        return JSONResponse(status_code=400, content={"error": "No file uploaded"})

    try:
        data = image.file.read()
    except OSError as e:
        logger.error(f"Failed to read upload: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to read file"})
    finally:
        image.file.close()

    mime_type = image.content_type if (image.content_type or "").startswith("image/") else DEFAULT_IMAGE_MIME
    try:
        response_text = analyze_image(data, mime_type)
    except BusinessError as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process image with OpenAI", "details": e.message},
        )

    return {
        "message": "Image processed successfully",
        "response": response_text,
    }


def main() -> None:
    """启动 HTTP 服务；OPENAI_API_KEY 缺失时直接退出。"""
    import uvicorn

    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY is not set")
        print("Error: OPENAI_API_KEY is not set", file=sys.stderr)
        sys.exit(1)

    uvicorn.run(app, host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()
