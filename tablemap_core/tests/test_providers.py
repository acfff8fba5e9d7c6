import pytest

from tablemap_core.domain.exceptions import ValidationError
from tablemap_core.providers import create_gateway
from tablemap_core.providers.openai_client import OpenAIVisionClient
from tablemap_core.providers.registry import OPENAI_CONFIG, get_provider_config


class DummySettings:
    default_provider = "openai"
    default_model = "layout-vision"
    openai_api_key = "sk-test-1234567890"
    http_timeout = 1.0
    openai_base_url = "https://api.openai.com/v1"


def test_create_gateway_default(monkeypatch):
    monkeypatch.setattr("tablemap_core.providers.settings", DummySettings())
    gateway = create_gateway()
    assert isinstance(gateway, OpenAIVisionClient)


def test_create_gateway_unknown(monkeypatch):
    monkeypatch.setattr("tablemap_core.providers.settings", DummySettings())
    with pytest.raises(ValidationError) as exc:
        create_gateway("kimi")
    assert exc.value.code == "UNKNOWN_PROVIDER"


def test_create_gateway_without_key(monkeypatch):
    class NoKey(DummySettings):
        openai_api_key = ""

    monkeypatch.setattr("tablemap_core.providers.settings", NoKey())
    with pytest.raises(ValidationError):
        create_gateway()


def test_registry_resolves_logical_model():
    assert get_provider_config("OpenAI") is OPENAI_CONFIG
    assert OPENAI_CONFIG.resolve_model("layout-vision") == "gpt-4o"
    assert OPENAI_CONFIG.resolve_model("gpt-4o-mini") == "gpt-4o-mini"
    with pytest.raises(KeyError):
        get_provider_config("glm")


def test_create_gateway_resolves_through_registry(monkeypatch):
    monkeypatch.setattr("tablemap_core.providers.settings", DummySettings())
    assert isinstance(create_gateway("OpenAI"), OpenAIVisionClient)


def test_create_gateway_unknown_default_provider(monkeypatch):
    class OtherProvider(DummySettings):
        default_provider = "glm"

    monkeypatch.setattr("tablemap_core.providers.settings", OtherProvider())
    with pytest.raises(ValidationError) as exc:
        create_gateway()
    assert exc.value.code == "UNKNOWN_PROVIDER"
