"""Prompt 配置加载工具。

prompt 的文本与 few-shot 示例都是数据而不是代码：每个配置是一个 YAML 文件，
包含 system / task / schema 三段文本和一个 exemplars 列表。
内置配置放在本目录下（如 restaurant_layout.yaml），也可以传入任意 YAML 路径。
"""

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from tablemap_core.domain.exceptions import ValidationError
from tablemap_core.domain.models import ImageReference, ImageUrl, InlineImage


PROMPTS_DIR = Path(__file__).resolve().parent
DEFAULT_PROFILE = "restaurant_layout"


@dataclass(frozen=True)
class Exemplar:
    """一个 few-shot 示例：标注过的参考图 + 标注说明 + （可选）期望输出。"""

    image: ImageReference
    annotation: str
    expected_output: Optional[str] = None


@dataclass(frozen=True)
class PromptProfile:
    """一套完整的 prompt 配置。"""

    name: str
    system: str
    task: str
    schema: str
    exemplars: Tuple[Exemplar, ...] = field(default_factory=tuple)


def load_prompt_profile(name_or_path: Union[str, Path] = DEFAULT_PROFILE) -> PromptProfile:
    """按名称（内置配置）或文件路径加载 PromptProfile。"""

    path = _resolve_profile_path(name_or_path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ValidationError(code="INVALID_PROMPT_PROFILE", message=f"Failed to read prompt profile {path}: {e}")
    if not isinstance(data, dict):
        raise ValidationError(code="INVALID_PROMPT_PROFILE", message=f"Prompt profile {path} is not a mapping")
    return _parse_profile(data, path)


def _resolve_profile_path(name_or_path: Union[str, Path]) -> Path:
    candidate = Path(name_or_path).expanduser()
    if candidate.suffix in {".yaml", ".yml"} and candidate.exists():
        return candidate
    bundled = PROMPTS_DIR / f"{name_or_path}.yaml"
    if bundled.exists():
        return bundled
    raise ValidationError(code="INVALID_PROMPT_PROFILE", message=f"Unknown prompt profile: {name_or_path!r}")


def _parse_profile(data: Dict[str, Any], path: Path) -> PromptProfile:
    missing = [key for key in ("system", "task", "schema") if not isinstance(data.get(key), str)]
    if missing:
        raise ValidationError(
            code="INVALID_PROMPT_PROFILE",
            message=f"Prompt profile {path} is missing text fields: {', '.join(missing)}",
        )
    raw_exemplars = data.get("exemplars") or []
    if not isinstance(raw_exemplars, list):
        raise ValidationError(code="INVALID_PROMPT_PROFILE", message=f"'exemplars' in {path} must be a list")
    exemplars = tuple(_parse_exemplar(item, path.parent) for item in raw_exemplars)
    return PromptProfile(
        name=str(data.get("name") or path.stem),
        system=data["system"].strip(),
        task=data["task"].strip(),
        schema=data["schema"].strip(),
        exemplars=exemplars,
    )


def _parse_exemplar(item: Any, base_dir: Path) -> Exemplar:
    if not isinstance(item, dict) or not isinstance(item.get("annotation"), str):
        raise ValidationError(code="INVALID_PROMPT_PROFILE", message=f"Invalid exemplar entry: {item!r}")

    if item.get("image_url"):
        image: ImageReference = ImageUrl(url=str(item["image_url"]))
    elif item.get("image_path"):
        image = _load_inline_image(base_dir / str(item["image_path"]))
    else:
        raise ValidationError(
            code="INVALID_PROMPT_PROFILE",
            message="Exemplar needs either 'image_url' or 'image_path'",
        )

    expected = item.get("expected_output")
    return Exemplar(
        image=image,
        annotation=item["annotation"].strip(),
        expected_output=expected.strip() if isinstance(expected, str) and expected.strip() else None,
    )


def _load_inline_image(path: Path) -> InlineImage:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ValidationError(code="INVALID_PROMPT_PROFILE", message=f"Failed to read exemplar image {path}: {e}")
    mime_type, _ = mimetypes.guess_type(path.name)
    return InlineImage.from_bytes(raw, mime_type)
