"""领域层模型与协议。

包含：
- models: Turn / Conversation / ModelRequest / ModelResponse 等统一模型。
- sanitize: 模型输出的围栏清洗。
- exceptions: 业务异常类型定义。
"""
