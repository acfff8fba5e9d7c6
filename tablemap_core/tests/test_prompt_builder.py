import base64
from pathlib import Path

import pytest

from tablemap_core.domain.exceptions import ValidationError
from tablemap_core.domain.models import ImagePart, ImageUrl, InlineImage, MultiPartContent, TextContent, TextPart
from tablemap_core.prompts import Exemplar, PromptProfile, load_prompt_profile
from tablemap_core.prompts.builder import RAW_JSON_INSTRUCTION, PromptBuilder


PROFILE_YAML = """
name: annotated
system: You are an expert in analyzing restaurant layouts.
task: Identify tables and walls.
schema: '{"objects": [{"type": "table", "x": 0, "y": 0, "width": 1, "height": 1}]}'
exemplars:
  - image_url: https://example.org/annotated-1.png
    annotation: Red rectangles are tables.
    expected_output: '{"objects": [{"type": "table", "x": 10, "y": 10, "width": 5, "height": 5}]}'
  - image_path: plan.png
    annotation: Thick black lines are walls.
"""


def _profile(n_exemplars: int) -> PromptProfile:
    exemplars = tuple(
        Exemplar(
            image=ImageUrl(f"https://example.org/{i}.png"),
            annotation=f"annotation {i}",
            expected_output='{"objects": []}',
        )
        for i in range(n_exemplars)
    )
    return PromptProfile(name="t", system="sys", task="task", schema="{}", exemplars=exemplars)


@pytest.mark.parametrize("n", [0, 1, 3])
def test_turn_count_and_final_image(n):
    conv = PromptBuilder(_profile(n)).build_conversation("aGVsbG8=", "image/jpeg")

    assert len(conv) == 2 + 2 * n + 1
    final = conv.final_turn
    assert final.role == "user"
    assert isinstance(final.content, MultiPartContent)
    assert len(final.content.parts) == 1
    image = final.content.parts[0].image
    assert image == InlineImage("aGVsbG8=", "image/jpeg")


def test_turn_order():
    conv = PromptBuilder(_profile(1)).build_conversation("eA==", "image/png")
    system, shown, expected, instruction, target = conv.turns

    assert system.role == "system"
    assert system.content == TextContent("sys")
    assert shown.content.parts == (TextPart("annotation 0"), ImagePart(ImageUrl("https://example.org/0.png")))
    assert '{"objects": []}' in expected.content.text
    assert isinstance(instruction.content, TextContent)
    assert instruction.content.text.startswith("task\n{}")
    assert isinstance(target.content, MultiPartContent)


def test_instruction_always_forbids_markdown_fence():
    conv = PromptBuilder(_profile(0)).build_conversation("eA==", "image/png")
    assert RAW_JSON_INSTRUCTION in conv.turns[-2].content.text


def test_default_profile_matches_restaurant_prompt():
    profile = load_prompt_profile()
    assert profile.name == "restaurant_layout"
    assert profile.system == "You are an expert in analyzing restaurant layouts."
    assert "Tables" in profile.task and "Windows" in profile.task
    assert '"objects"' in profile.schema
    assert profile.exemplars == ()

    conv = PromptBuilder(profile).build_conversation("eA==", "image/png")
    assert len(conv) == 3


def test_load_profile_from_file(tmp_path: Path):
    (tmp_path / "plan.png").write_bytes(b"fake-png")
    path = tmp_path / "annotated.yaml"
    path.write_text(PROFILE_YAML, encoding="utf-8")

    profile = load_prompt_profile(str(path))

    assert profile.name == "annotated"
    first, second = profile.exemplars
    assert first.image == ImageUrl("https://example.org/annotated-1.png")
    assert first.expected_output.startswith('{"objects"')
    assert isinstance(second.image, InlineImage)
    assert second.image.mime_type == "image/png"
    assert base64.b64decode(second.image.data) == b"fake-png"
    assert second.expected_output is None

    conv = PromptBuilder(profile).build_conversation("eA==", "image/png")
    assert len(conv) == 2 + 2 * 2 + 1
    assert "annotations" in conv.turns[4].content.text


def test_unknown_profile_name():
    with pytest.raises(ValidationError) as exc:
        load_prompt_profile("does-not-exist")
    assert exc.value.code == "INVALID_PROMPT_PROFILE"


def test_profile_missing_fields(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("system: hi\nexemplars: []\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_prompt_profile(path)


def test_exemplar_without_image(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("system: s\ntask: t\nschema: '{}'\nexemplars:\n  - annotation: a\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_prompt_profile(path)
