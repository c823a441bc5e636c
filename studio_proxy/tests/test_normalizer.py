"""Unit tests for raw record normalization."""
from __future__ import annotations

import pytest

from studio_proxy.catalog.normalizer import is_free, normalize_chat, normalize_image, positive_int


@pytest.mark.parametrize("normalize", [normalize_image, normalize_chat])
def test_name_falls_back_to_id(normalize):
    entry = normalize({"id": "vendor/some-model"})
    assert entry.name == "vendor/some-model"  # nosec B101


@pytest.mark.parametrize("normalize", [normalize_image, normalize_chat])
def test_name_prefers_name_then_display_name(normalize):
    assert normalize({"id": "x", "name": "Nice", "display_name": "Other"}).name == "Nice"  # nosec B101
    assert normalize({"id": "x", "display_name": "Other"}).name == "Other"  # nosec B101
    assert normalize({"id": "x", "name": "   ", "display_name": "Other"}).name == "Other"  # nosec B101


def test_description_from_raw_or_classifier():
    assert normalize_chat({"id": "gpt-4o", "description": "Custom"}).description == "Custom"  # nosec B101
    assert normalize_chat({"id": "gpt-4o"}).description == "🤖 OpenAI flagship model"  # nosec B101


def test_image_defaults():
    entry = normalize_image({"id": "black-forest-labs/FLUX.1-schnell"})
    assert entry.provider == "black-forest-labs"  # nosec B101
    assert (entry.max_width, entry.max_height) == (2048, 2048)  # nosec B101
    assert entry.speed == "fast"  # nosec B101
    assert entry.free is False  # nosec B101


def test_image_dimensions_from_raw():
    entry = normalize_image({"id": "sdxl", "max_width": 1536, "max_height": "768"})
    assert (entry.max_width, entry.max_height) == (1536, 768)  # nosec B101
    bad = normalize_image({"id": "sdxl", "max_width": -4, "max_height": "wide"})
    assert (bad.max_width, bad.max_height) == (2048, 2048)  # nosec B101


@pytest.mark.parametrize(
    "raw_ctx,expected",
    [
        (8192, 8192),
        ("32768", 32768),
        ("32,000 tokens", 32000),
        ("128k", 128000),
        ("1M", 1000000),
        (0, 4096),
        (-1, 4096),
        ("n/a", 4096),
        (None, 4096),
        (True, 4096),
    ],
)
def test_chat_context_window(raw_ctx, expected):
    entry = normalize_chat({"id": "llama", "context_length": raw_ctx})
    assert entry.context_window == expected  # nosec B101


def test_positive_int_rejects_non_numbers():
    assert positive_int(None) is None  # nosec B101
    assert positive_int(False) is None  # nosec B101
    assert positive_int(float("inf")) is None  # nosec B101
    assert positive_int(12.9) == 12  # nosec B101


def test_free_is_false_unless_derived():
    raw = {"id": "llama", "pricing": {"input": 0}}
    assert normalize_chat(raw).free is False  # nosec B101
    assert normalize_chat(raw, derive_free=True).free is True  # nosec B101


@pytest.mark.parametrize(
    "raw,expected",
    [
        ({}, True),
        ({"pricing": None}, True),
        ({"pricing": {"input": 0}}, True),
        ({"pricing": {"input": 0.0, "output": 1}}, True),
        ({"pricing": {"input": "0"}}, True),
        ({"pricing": {"input": 0.2}}, False),
        ({"pricing": {"input": "0.5"}}, False),
        ({"pricing": {}}, False),
        ({"pricing": {"input": "free"}}, False),
    ],
)
def test_is_free(raw, expected):
    assert is_free(raw) is expected  # nosec B101


def test_normalize_never_raises_on_odd_fields():
    entry = normalize_chat({"id": "qwen", "name": 42, "description": ["x"], "context_length": {}})
    assert entry.name == "qwen"  # nosec B101
    assert entry.description == "🇨🇳 Alibaba Qwen"  # nosec B101
    assert entry.context_window == 4096  # nosec B101
