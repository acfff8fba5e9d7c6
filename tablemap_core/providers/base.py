"""Provider 抽象接口。

上层 service 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ModelGateway（如 OpenAIVisionClient）。
- 负责：将 ModelRequest 转成具体 API 请求，把响应 JSON 解码为 ModelResponse，
  并把最终回答清洗成调用方可以当作 JSON 使用的文本。
"""

from typing import Optional, Protocol

from tablemap_core.domain.models import Conversation, ModelRequest, ModelResponse


class ModelGateway(Protocol):
    """多模态模型网关协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - complete(req): 执行一次调用，返回解码后的 ModelResponse。
    - analyze(conversation, model): 执行一次调用并返回清洗后的回答文本。
    """

    name: str

    def complete(self, req: ModelRequest) -> ModelResponse:
        ...

    def analyze(self, conversation: Conversation, model: Optional[str] = None) -> str:
        ...
