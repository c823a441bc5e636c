"""Pytest configuration for the studio proxy test suite.

Every test runs with the settings-related environment cleared so a developer
``.env`` or exported keys never leak into assertions.
"""

from __future__ import annotations

from typing import Iterator

import pytest

import studio_proxy.config as config_module
from studio_proxy.config import ENV_FIELD_MAP, StudioSettings
from studio_proxy.base.timeouts import CATALOG_TIMEOUT_ENV, CHAT_TIMEOUT_ENV, IMAGE_TIMEOUT_ENV


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear settings env vars and point ``.env`` loading at an empty path."""
    for env_name in ENV_FIELD_MAP.values():
        monkeypatch.delenv(env_name, raising=False)
    for env_name in (
        config_module.CONFIG_FILE_ENV,
        CATALOG_TIMEOUT_ENV,
        IMAGE_TIMEOUT_ENV,
        CHAT_TIMEOUT_ENV,
        "STUDIO_LOG_LEVEL",
    ):
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.setenv(config_module.DOTENV_FILE_ENV, str(tmp_path / "missing.env"))
    monkeypatch.setattr(config_module, "_DOTENV_LOADED", False)
    yield


@pytest.fixture()
def settings() -> StudioSettings:
    """Settings with a models endpoint and both credentials configured."""
    return StudioSettings(
        models_endpoint="https://models.example.test/v1/models",
        image_endpoint="https://images.example.test/v1/images/generations",
        chat_endpoint="https://chat.example.test/v1/chat/completions",
        image_api_key="img-key",
        chat_api_key="chat-key",
        static_dir="",
    )
