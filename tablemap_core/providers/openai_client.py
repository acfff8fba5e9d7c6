"""OpenAI Provider 适配器（多模态 chat/completions）。

本模块负责：

1. 把 ModelRequest（model + Conversation）序列化为 chat/completions 请求体。
2. 发送一次阻塞 HTTP 请求（Bearer 认证，JSON 请求体），不做重试。
3. 记录原始响应体，再解码为 ModelResponse，并区分三类失败：
   - TransportError：请求没完成，或响应体不是预期的信封结构；
   - ProviderError：信封里带了非空的 error.message；
   - EmptyResponseError：没有错误但 choices 为空。
4. 取第一个 choice 的文本，剥掉首尾的 markdown 围栏后返回。
"""

from typing import Any, Dict, List, Optional

import httpx

from tablemap_core.domain.exceptions import (
    EmptyResponseError,
    ProviderError,
    TransportError,
    ValidationError,
)
from tablemap_core.domain.models import (
    Conversation,
    ImagePart,
    ModelRequest,
    ModelResponse,
    MultiPartContent,
    TextContent,
    TextPart,
    Turn,
)
from tablemap_core.domain.sanitize import strip_code_fence
from tablemap_core.infrastructure.logging.logger import logger
from tablemap_core.providers.registry import OPENAI_CONFIG


class OpenAIVisionClient:
    """OpenAI 多模态网关实现。

    - name: Provider 名称（供日志/调试使用）。
    - complete: 执行一次调用，返回解码后的 ModelResponse。
    - analyze: 对外统一调用入口，返回清洗后的回答文本。
    """

    name = "openai"

    def __init__(self, settings):
        # API key 缺失属于启动期错误，构造时就拒绝
        if not getattr(settings, "openai_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="OPENAI_API_KEY not set")
        self._settings = settings

    def analyze(self, conversation: Conversation, model: Optional[str] = None) -> str:
        """发送对话并返回 SanitizedAnswer 文本。

        不校验剩余文本是否为合法 JSON，这由调用方负责。
        """

        logical = model or getattr(self._settings, "default_model", None) or "layout-vision"
        req = ModelRequest(model=OPENAI_CONFIG.resolve_model(logical), conversation=conversation)
        result = self.complete(req)
        if not result.ok:
            raise ProviderError(message=result.provider_error, provider=self.name, model=req.model)
        return strip_code_fence(result.answer)

    def complete(self, req: ModelRequest) -> ModelResponse:
        payload = self._build_payload(req)
        base = getattr(self._settings, "openai_base_url", None) or OPENAI_CONFIG.base_url
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    f"{base}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self._settings.openai_api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等
            raise TransportError(message=str(e) or type(e).__name__, cause=e) from e

        logger.info(
            f"OpenAI raw response: {resp.text}",
            extra={"extra": {"provider": self.name, "model": req.model, "http_status": resp.status_code}},
        )
        return self._decode_response(resp)

    # ---- 辅助方法 ----

    def _build_payload(self, req: ModelRequest) -> Dict[str, Any]:
        return {
            "model": req.model,
            "messages": [self._turn_to_payload(turn) for turn in req.conversation],
        }

    @staticmethod
    def _turn_to_payload(turn: Turn) -> Dict[str, Any]:
        content = turn.content
        if isinstance(content, TextContent):
            return {"role": turn.role, "content": content.text}
        parts: List[Dict[str, Any]] = []
        for part in content.parts:
            if isinstance(part, TextPart):
                parts.append({"type": "text", "text": part.text})
            elif isinstance(part, ImagePart):
                parts.append({"type": "image_url", "image_url": {"url": part.image.data_url}})
        return {"role": turn.role, "content": parts}

    def _decode_response(self, resp: httpx.Response) -> ModelResponse:
        """把响应体解码为 ModelResponse。

        error.message 非空时优先返回 provider 错误，不看 choices 和 HTTP 状态码。
        """

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(
                message=f"Failed to decode provider response: {e}",
                cause=e,
                http_status=resp.status_code if resp.status_code >= 400 else 502,
            ) from e
        if not isinstance(data, dict):
            raise self._envelope_error("response body is not a JSON object")

        error = data.get("error")
        if error is not None and not isinstance(error, dict):
            raise self._envelope_error("'error' is not an object")
        error_message = (error or {}).get("message")
        if error_message is None:
            error_message = ""
        if not isinstance(error_message, str):
            raise self._envelope_error("'error.message' is not a string")
        if error_message:
            return ModelResponse(provider_error=error_message)

        choices = data.get("choices")
        if choices is None:
            choices = []
        if not isinstance(choices, list):
            raise self._envelope_error("'choices' is not a list")
        if not choices:
            raise EmptyResponseError(provider=self.name)

        first = choices[0]
        if not isinstance(first, dict):
            raise self._envelope_error("'choices[0]' is not an object")
        message = first.get("message")
        if message is None:
            message = {}
        if not isinstance(message, dict):
            raise self._envelope_error("'choices[0].message' is not an object")
        content = message.get("content")
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise self._envelope_error("'choices[0].message.content' is not a string")
        return ModelResponse(answer=content)

    def _envelope_error(self, detail: str) -> TransportError:
        cause = ValueError(detail)
        return TransportError(message=f"Unexpected response envelope: {detail}", cause=cause, provider=self.name)
