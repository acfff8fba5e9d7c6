"""统一的对话与结果数据模型。

本模块定义了版面识别流水线内部共享的标准数据结构：

- Turn / Conversation: 发给多模态模型的有序对话。
- TextContent / MultiPartContent: Turn 的两种内容形态（纯文本 或 文本+图片分片）。
- ImageUrl / InlineImage: 图片引用，远程 URL（few-shot 示例）或内联 base64（用户上传）。
- ModelRequest / ModelResponse: 一次模型调用的请求与解码后的结果。

Provider 适配器（如 OpenAIVisionClient）负责在这些模型与厂商 JSON 之间做转换，
所有对象都是一次请求内新建、不可变的值。
"""

import base64
from dataclasses import dataclass
from typing import Iterator, Literal, Optional, Tuple, Union


# 对话角色：本流水线只会产生 system / user 两种消息
Role = Literal["system", "user"]
ROLES = ("system", "user")

DEFAULT_IMAGE_MIME = "image/png"


@dataclass(frozen=True)
class ImageUrl:
    """可远程获取的图片地址，用于 few-shot 示例图。"""

    url: str

    @property
    def data_url(self) -> str:
        return self.url


@dataclass(frozen=True)
class InlineImage:
    """内联图片：base64 文本 + MIME 类型。

    data 必须已经是 base64 编码后的文本；mime_type 为空时回退为 image/png。
    """

    data: str
    mime_type: str = DEFAULT_IMAGE_MIME

    def __post_init__(self) -> None:
        if not self.mime_type:
            object.__setattr__(self, "mime_type", DEFAULT_IMAGE_MIME)

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: Optional[str] = None) -> "InlineImage":
        return cls(data=base64.standard_b64encode(raw).decode("ascii"), mime_type=mime_type or DEFAULT_IMAGE_MIME)

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


ImageReference = Union[ImageUrl, InlineImage]


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    image: ImageReference

    def __post_init__(self) -> None:
        if not isinstance(self.image, (ImageUrl, InlineImage)):
            raise ValueError(f"ImagePart expects ImageUrl or InlineImage, got {type(self.image).__name__}")


Part = Union[TextPart, ImagePart]


@dataclass(frozen=True)
class TextContent:
    """纯文本内容（指令 / 问题）。"""

    text: str


@dataclass(frozen=True)
class MultiPartContent:
    """有序分片内容。只要包含图片，就必须使用这种形态。"""

    parts: Tuple[Part, ...]

    def __post_init__(self) -> None:
        parts = tuple(self.parts)
        if not parts:
            raise ValueError("MultiPartContent requires at least one part")
        for part in parts:
            if not isinstance(part, (TextPart, ImagePart)):
                raise ValueError(f"Unsupported content part: {type(part).__name__}")
        object.__setattr__(self, "parts", parts)

    @property
    def images(self) -> Tuple[ImagePart, ...]:
        return tuple(p for p in self.parts if isinstance(p, ImagePart))


Content = Union[TextContent, MultiPartContent]


@dataclass(frozen=True)
class Turn:
    """对话中的一条消息。

    - role: system 或 user。
    - content: TextContent 或 MultiPartContent，构造后不再变化。
    """

    role: Role
    content: Content

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unsupported role: {self.role!r}")
        if not isinstance(self.content, (TextContent, MultiPartContent)):
            raise ValueError("Turn content must be TextContent or MultiPartContent")


@dataclass(frozen=True)
class Conversation:
    """有序的 Turn 序列，顺序本身有语义（示例在前，目标图片在最后）。"""

    turns: Tuple[Turn, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "turns", tuple(self.turns))

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)

    @property
    def final_turn(self) -> Turn:
        return self.turns[-1]


@dataclass(frozen=True)
class ModelRequest:
    """一次模型调用请求：provider 侧模型 ID + 对话。"""

    model: str
    conversation: Conversation


@dataclass(frozen=True)
class ModelResponse:
    """解码后的 Provider 响应，answer 与 provider_error 有且仅有一个非空。"""

    answer: Optional[str] = None
    provider_error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.answer is None) == (self.provider_error is None):
            raise ValueError("ModelResponse needs exactly one of answer / provider_error")

    @property
    def ok(self) -> bool:
        return self.provider_error is None
