from __future__ import annotations

import json

import pytest

import studio_proxy.config as config_module
from studio_proxy.config import ENV_FIELD_MAP, StudioSettings, get_settings
from studio_proxy.config.env import ENV_MAP, get_env_var_name, is_placeholder


def test_env_map_contains_roles():
    assert ENV_MAP == {"image": "IMAGE_API_KEY", "chat": "CHAT_API_KEY"}  # nosec B101
    assert get_env_var_name("Image") == "IMAGE_API_KEY"  # nosec B101
    assert get_env_var_name("audio") is None  # nosec B101
    assert get_env_var_name("") is None  # nosec B101


def test_is_placeholder_heuristics():
    assert is_placeholder("placeholder-value")  # nosec B101
    assert is_placeholder("ChangeMe123")  # nosec B101
    assert is_placeholder("your-api-key-here")  # nosec B101
    assert is_placeholder("test_token")  # nosec B101
    assert not is_placeholder("sk-real-value")  # nosec B101
    assert not is_placeholder(None)  # nosec B101


def test_defaults_without_any_source():
    s = get_settings()
    assert s == StudioSettings()  # nosec B101
    assert s.port == 3000 and s.host == "0.0.0.0"  # nosec B101
    assert s.models_endpoint is None  # nosec B101
    assert s.image_endpoint is None and s.chat_endpoint is None  # nosec B101
    assert s.allow_origins == ["*"]  # nosec B101


def test_env_values_are_coerced(monkeypatch):
    monkeypatch.setenv("MODELS_API_ENDPOINT", "https://m.example/v1/models")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MODELS_CHAT_CAP", "12")
    monkeypatch.setenv("MODELS_DERIVE_FREE", "yes")
    monkeypatch.setenv("MODELS_IMAGE_CAP", "")
    monkeypatch.setenv("STUDIO_CORS_ORIGINS", "http://a.test, http://b.test")
    s = get_settings()
    assert s.models_endpoint == "https://m.example/v1/models"  # nosec B101
    assert s.port == 8080  # nosec B101
    assert s.chat_model_cap == 12  # nosec B101
    assert s.image_model_cap is None  # nosec B101
    assert s.derive_free_from_pricing is True  # nosec B101
    assert s.allow_origins == ["http://a.test", "http://b.test"]  # nosec B101


def test_invalid_numeric_env_raises(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")
    with pytest.raises(ValueError, match="port"):
        get_settings()


def test_catalog_key_prefers_image_key():
    assert StudioSettings(image_api_key="i", chat_api_key="c").catalog_api_key == "i"  # nosec B101
    assert StudioSettings(chat_api_key="c").catalog_api_key == "c"  # nosec B101
    assert StudioSettings().catalog_api_key is None  # nosec B101


def test_merge_order_file_env_overrides(monkeypatch, tmp_path):
    cfg = tmp_path / "studio.yaml"
    cfg.write_text("api_provider: together\nchat_model_cap: 40\nport: 4000\nunknown_key: 1\n", encoding="utf-8")
    monkeypatch.setenv(config_module.CONFIG_FILE_ENV, str(cfg))
    monkeypatch.setenv("PORT", "5000")
    s = get_settings(overrides={"chat_model_cap": 7, "host": None})
    assert s.api_provider == "together"  # nosec B101
    assert s.port == 5000  # nosec B101
    assert s.chat_model_cap == 7  # nosec B101
    assert s.host == "0.0.0.0"  # nosec B101


def test_json_config_file(monkeypatch, tmp_path):
    cfg = tmp_path / "studio.json"
    cfg.write_text(json.dumps({"staleness_seconds": "120", "static_dir": "web"}), encoding="utf-8")
    monkeypatch.setenv(config_module.CONFIG_FILE_ENV, str(cfg))
    s = get_settings()
    assert s.staleness_seconds == 120  # nosec B101
    assert s.static_dir == "web"  # nosec B101


def test_missing_config_file_is_ignored(monkeypatch, tmp_path):
    monkeypatch.setenv(config_module.CONFIG_FILE_ENV, str(tmp_path / "nope.yaml"))
    assert get_settings() == StudioSettings()  # nosec B101


def test_dotenv_fills_unset_and_placeholder_values(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "# comment\nIMAGE_API_KEY=\"from-dotenv\"\nCHAT_API_KEY=dotenv-chat\n\nbogus line\n",
        encoding="utf-8",
    )
    monkeypatch.setenv(config_module.DOTENV_FILE_ENV, str(dotenv))
    monkeypatch.setenv("CHAT_API_KEY", "real-chat-key")
    s = get_settings()
    assert s.image_api_key == "from-dotenv"  # nosec B101
    assert s.chat_api_key == "real-chat-key"  # nosec B101


def test_dotenv_replaces_placeholder(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text("IMAGE_API_KEY=real-image\n", encoding="utf-8")
    monkeypatch.setenv(config_module.DOTENV_FILE_ENV, str(dotenv))
    monkeypatch.setenv("IMAGE_API_KEY", "your-api-key")
    assert get_settings().image_api_key == "real-image"  # nosec B101


def test_env_field_map_covers_every_field():
    from dataclasses import fields

    assert set(ENV_FIELD_MAP) == {f.name for f in fields(StudioSettings)}  # nosec B101
