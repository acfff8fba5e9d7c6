"""把 PromptProfile 和用户上传的图片组装成 Conversation。

Turn 顺序固定：
1. system：专家角色与任务说明；
2. 每个 few-shot 示例两条 user：[标注说明, 示例图]，然后是该示例的期望输出；
3. user：抽取任务 + JSON schema + “只返回原始 JSON”要求；
4. user：只包含用户上传的图片。
"""

from typing import List, Optional

from tablemap_core.domain.models import (
    Conversation,
    ImagePart,
    InlineImage,
    MultiPartContent,
    TextContent,
    TextPart,
    Turn,
)
from tablemap_core.prompts import Exemplar, PromptProfile, load_prompt_profile


RAW_JSON_INSTRUCTION = (
    "IMPORTANT: Do NOT wrap the answer in markdown code fences (no ``` and no ```json).\n"
    "Only return the JSON output as raw JSON, with no extra formatting or commentary."
)

EXPECTED_OUTPUT_TEMPLATE = "Expected output for the example above:\n{output}"
NO_EXPECTED_OUTPUT = (
    "No reference output is given for the example above; "
    "use its annotations to understand how drawn objects map to JSON fields."
)


class PromptBuilder:
    """基于某个 PromptProfile 构造对话，纯函数式，无副作用。"""

    def __init__(self, profile: Optional[PromptProfile] = None):
        self._profile = profile or load_prompt_profile()

    def build_conversation(self, image_data: str, mime_type: str) -> Conversation:
        turns: List[Turn] = [Turn(role="system", content=TextContent(self._profile.system))]
        for exemplar in self._profile.exemplars:
            turns.extend(self._exemplar_turns(exemplar))
        turns.append(Turn(role="user", content=TextContent(self._instruction_text())))
        target = InlineImage(data=image_data, mime_type=mime_type)
        turns.append(Turn(role="user", content=MultiPartContent((ImagePart(target),))))
        return Conversation(tuple(turns))

    def _instruction_text(self) -> str:
        return f"{self._profile.task}\n{self._profile.schema}\n\n{RAW_JSON_INSTRUCTION}"

    @staticmethod
    def _exemplar_turns(exemplar: Exemplar) -> List[Turn]:
        shown = Turn(
            role="user",
            content=MultiPartContent((TextPart(exemplar.annotation), ImagePart(exemplar.image))),
        )
        if exemplar.expected_output:
            answer_text = EXPECTED_OUTPUT_TEMPLATE.format(output=exemplar.expected_output)
        else:
            answer_text = NO_EXPECTED_OUTPUT
        return [shown, Turn(role="user", content=TextContent(answer_text))]
