import pytest
from pydantic import ValidationError as PydanticValidationError

from tablemap_core.config.settings import PydanticSettings


def test_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("OPENAI_API_KEY", "PROMPT_PROFILE", "HTTP_TIMEOUT", "TABLEMAP_CONFIG_FILE", "DEFAULT_MODEL"):
        monkeypatch.delenv(key, raising=False)

    cfg = PydanticSettings(_env_file=None)

    assert cfg.default_provider == "openai"
    assert cfg.default_model == "layout-vision"
    assert cfg.openai_base_url == "https://api.openai.com/v1"
    assert cfg.prompt_profile == "restaurant_layout"
    assert cfg.cors_origins == ["http://localhost:5173"]
    assert cfg.server_port == 8080


def test_settings_reads_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env-1234567890")
    monkeypatch.setenv("HTTP_TIMEOUT", "12.5")

    cfg = PydanticSettings(_env_file=None)

    assert cfg.openai_api_key == "sk-env-1234567890"
    assert cfg.http_timeout == 12.5


def test_settings_rejects_short_key():
    with pytest.raises(PydanticValidationError):
        PydanticSettings(_env_file=None, openai_api_key="short")


def test_settings_yaml_config_file(monkeypatch, tmp_path):
    cfg_file = tmp_path / "tablemap.yaml"
    cfg_file.write_text("prompt_profile: my_profile\nserver_port: 9000\n", encoding="utf-8")
    monkeypatch.setenv("TABLEMAP_CONFIG_FILE", str(cfg_file))
    monkeypatch.delenv("PROMPT_PROFILE", raising=False)
    monkeypatch.delenv("SERVER_PORT", raising=False)

    cfg = PydanticSettings(_env_file=None)

    assert cfg.prompt_profile == "my_profile"
    assert cfg.server_port == 9000
