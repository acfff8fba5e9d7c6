"""多模态模型 Provider 集成层。

该包下的模块负责：
- 定义网关抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供各厂商的具体实现 (如 openai_client)。
"""

from typing import Optional

from tablemap_core.config.settings import settings
from tablemap_core.domain.exceptions import ValidationError
from tablemap_core.providers.base import ModelGateway
from tablemap_core.providers.openai_client import OpenAIVisionClient
from tablemap_core.providers.registry import get_provider_config


# registry 中的 Provider 名 -> 网关实现
GATEWAY_CLASSES = {
    "openai": OpenAIVisionClient,
}


def create_gateway(name: Optional[str] = None) -> ModelGateway:
    """根据名称创建网关实例，默认取配置中的 provider。"""

    provider_name = name or getattr(settings, "default_provider", "openai")
    try:
        provider_cfg = get_provider_config(provider_name)
    except KeyError:
        raise ValidationError(code="UNKNOWN_PROVIDER", message=f"Unknown provider: {provider_name!r}")
    return GATEWAY_CLASSES[provider_cfg.name](settings)
