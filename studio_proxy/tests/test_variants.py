from __future__ import annotations

from studio_proxy.catalog.variants import (
    GENERIC,
    MINIMAL,
    TOGETHER,
    get_variant,
    resolve_models_endpoint,
    variant_for_settings,
)
from studio_proxy.config import StudioSettings


def test_variant_table():
    assert (GENERIC.image_cap, GENERIC.chat_cap) == (20, 30)  # nosec B101
    assert (TOGETHER.image_cap, TOGETHER.chat_cap) == (15, 25)  # nosec B101
    assert (MINIMAL.image_cap, MINIMAL.chat_cap) == (10, 15)  # nosec B101
    assert TOGETHER.sort_chat_by_context and TOGETHER.derive_free  # nosec B101
    assert not GENERIC.sort_chat_by_context and not GENERIC.derive_free  # nosec B101
    assert GENERIC.default_endpoint is None and MINIMAL.default_endpoint is None  # nosec B101


def test_get_variant_lookup():
    assert get_variant("Together") is TOGETHER  # nosec B101
    assert get_variant(" minimal ") is MINIMAL  # nosec B101
    assert get_variant("nope") is GENERIC  # nosec B101
    assert get_variant(None) is GENERIC  # nosec B101


def test_settings_override_caps_and_free():
    s = StudioSettings(api_provider="together", image_model_cap=3, derive_free_from_pricing=False)
    v = variant_for_settings(s)
    assert v.image_cap == 3 and v.chat_cap == 25  # nosec B101
    assert v.derive_free is False  # nosec B101
    assert TOGETHER.image_cap == 15  # nosec B101


def test_resolve_models_endpoint():
    assert resolve_models_endpoint(StudioSettings(), GENERIC) is None  # nosec B101
    assert resolve_models_endpoint(StudioSettings(), TOGETHER) == TOGETHER.default_endpoint  # nosec B101
    custom = StudioSettings(models_endpoint="https://x.test/models")
    assert resolve_models_endpoint(custom, TOGETHER) == "https://x.test/models"  # nosec B101
