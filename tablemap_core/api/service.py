"""对外 API 服务模块。

提供简化的函数接口供上层应用（HTTP 上传接口、脚本）调用。
"""

from typing import Optional

from tablemap_core.config.settings import settings
from tablemap_core.domain.exceptions import BusinessError
from tablemap_core.domain.models import InlineImage
from tablemap_core.infrastructure.logging.logger import logger
from tablemap_core.prompts import load_prompt_profile
from tablemap_core.prompts.builder import PromptBuilder
from tablemap_core.providers import create_gateway
from tablemap_core.providers.base import ModelGateway


_builder: Optional[PromptBuilder] = None
_gateway: Optional[ModelGateway] = None


def get_default_builder() -> PromptBuilder:
    """获取默认的 PromptBuilder（单例，prompt 配置只加载一次）。"""
    global _builder
    if _builder is None:
        _builder = PromptBuilder(load_prompt_profile(settings.prompt_profile))
    return _builder


def get_default_gateway() -> ModelGateway:
    """获取默认的模型网关（单例）。"""
    global _gateway
    if _gateway is None:
        _gateway = create_gateway()
    return _gateway


def analyze_image(image_bytes: bytes, mime_type: Optional[str] = None) -> str:
    """识别一张平面图，返回模型给出的（已清洗的）JSON 文本。

    Args:
        image_bytes: 上传图片的原始字节
        mime_type: 图片 MIME 类型，缺省为 image/png

    Returns:
        去掉 markdown 围栏后的回答文本，不保证是合法 JSON

    Raises:
        TransportError / ProviderError / EmptyResponseError
    """
    image = InlineImage.from_bytes(image_bytes, mime_type)
    try:
        conversation = get_default_builder().build_conversation(image.data, image.mime_type)
        return get_default_gateway().analyze(conversation)
    except BusinessError as e:
        logger.error(f"Image analysis failed: {e}", extra={"extra": {
            "code": e.code,
            "mime_type": image.mime_type,
            "size": len(image_bytes),
        }})
        raise
