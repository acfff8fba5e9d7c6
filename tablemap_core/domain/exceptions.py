"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
便于在 API 层统一捕获，并映射成 HTTP 错误响应。
"""

from typing import Optional


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "TRANSPORT_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、model 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class TransportError(BusinessError):
    """调用未能完成，或响应体无法解析为预期的响应信封。

    cause 保存底层异常（httpx.RequestError、JSONDecodeError 等）。
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        code: str = "TRANSPORT_ERROR",
        http_status: int = 502,
        **extra,
    ):
        super().__init__(code=code, message=message, http_status=http_status, **extra)
        self.cause = cause


class ProviderError(BusinessError):
    """远端 API 显式返回了错误信息，message 原样保留。"""

    def __init__(self, message: str, code: str = "PROVIDER_ERROR", http_status: int = 502, **extra):
        super().__init__(code=code, message=message, http_status=http_status, **extra)


class EmptyResponseError(BusinessError):
    """响应信封可以解析、没有错误，但 choices 为空。"""

    def __init__(
        self,
        message: str = "no response from provider (empty choices)",
        code: str = "EMPTY_RESPONSE",
        http_status: int = 502,
        **extra,
    ):
        super().__init__(code=code, message=message, http_status=http_status, **extra)


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
