"""模型输出清洗。

模型经常把 JSON 包在 markdown 代码块里（```json ... ```），
这里只剥掉首尾的围栏标记，不解析、不校验 JSON 本身。
"""

import re

# 开头围栏：``` 后可紧跟 json 语言标记（不区分大小写）
_LEADING_FENCE = re.compile(r"\A```(?:(?i:json)(?!\w))?")
_TRAILING_FENCE = re.compile(r"```\Z")


def strip_code_fence(text: str) -> str:
    """去掉首尾的 markdown 围栏和空白，返回 SanitizedAnswer 文本。

    只匹配精确的围栏 token，内部内容保持不变；
    重复执行直到不再变化，因此多次调用结果一致。
    """

    current = (text or "").strip()
    while True:
        stripped = _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", current, count=1), count=1).strip()
        if stripped == current:
            return current
        current = stripped
