"""
Heuristic classification of model identifiers.

Three pure functions map a model id to a provider tag, a display description
and a speed tier. Each is driven by an ordered rule table: rows are tested
top to bottom with a case-insensitive substring match and the first matching
row wins, so the table order *is* the precedence. Missing or empty ids never
raise; they resolve to the documented fallback values.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

PROVIDER_UNKNOWN = "unknown"
PROVIDER_CUSTOM = "custom"

PROVIDERS = (
    "openai",
    "anthropic",
    "meta",
    "mistral",
    "alibaba",
    "xai",
    "black-forest-labs",
    "stability",
    "together",
    PROVIDER_CUSTOM,
    PROVIDER_UNKNOWN,
)

SPEED_FAST = "fast"
SPEED_MEDIUM = "medium"
SPEED_SLOW = "slow"

GENERIC_DESCRIPTION = "🤖 AI model"


@dataclass(frozen=True)
class Rule:
    """One row of a classification table.

    ``variants`` holds sub-rules consulted only when the row itself matched;
    the row's ``value`` applies when none of them does.
    """

    tokens: Tuple[str, ...]
    value: str
    variants: Tuple["Rule", ...] = ()

    def matches(self, lowered: str) -> bool:
        return any(t in lowered for t in self.tokens)


PROVIDER_RULES: Tuple[Rule, ...] = (
    Rule(("gpt", "dall-e"), "openai"),
    Rule(("claude",), "anthropic"),
    Rule(("llama",), "meta"),
    Rule(("mixtral", "mistral"), "mistral"),
    Rule(("qwen",), "alibaba"),
    Rule(("grok",), "xai"),
    Rule(("flux",), "black-forest-labs"),
    Rule(("stable-diffusion", "sdxl"), "stability"),
    Rule(("togethercomputer",), "together"),
)

DESCRIPTION_RULES: Tuple[Rule, ...] = (
    Rule(("gpt-4",), "🤖 OpenAI flagship model"),
    Rule(("gpt-3.5",), "⚡ Fast responses"),
    Rule(("dall-e-3",), "🎨 High-quality image generation"),
    Rule(("dall-e-2",), "⚡ Fast image generation"),
    Rule(("grok",), "🚀 xAI Grok model"),
    Rule(
        ("flux",),
        "🎨 FLUX image model",
        variants=(
            Rule(("schnell",), "⚡ Ultra-fast generation"),
            Rule(("dev",), "🔧 Development build"),
            Rule(("pro",), "🏆 Professional quality"),
        ),
    ),
    Rule(("llama",), "🦙 Meta open model"),
    Rule(("claude",), "🤖 Anthropic Claude"),
    Rule(("qwen",), "🇨🇳 Alibaba Qwen"),
    Rule(("mixtral",), "🔮 Mistral MoE"),
    Rule(("stable-diffusion", "sdxl"), "🎨 Stable Diffusion"),
)

SPEED_RULES: Tuple[Rule, ...] = (
    Rule(("schnell", "turbo", "fast"), SPEED_FAST),
    Rule(("dall-e-2", "gpt-3.5"), SPEED_FAST),
    Rule(("dev", "base"), SPEED_MEDIUM),
    Rule(("pro", "gpt-4", "claude"), SPEED_SLOW),
)


def _lowered(model_id: Optional[str]) -> str:
    if not isinstance(model_id, str):
        return ""
    return model_id.lower()


def first_match(rules: Sequence[Rule], model_id: Optional[str]) -> Optional[str]:
    """Return the value of the first rule matching ``model_id``, or ``None``.

    Sub-rules of the matching row are tried before its own value.
    """
    lowered = _lowered(model_id)
    if not lowered:
        return None
    for rule in rules:
        if not rule.matches(lowered):
            continue
        for variant in rule.variants:
            if variant.matches(lowered):
                return variant.value
        return rule.value
    return None


def classify_provider(model_id: Optional[str]) -> str:
    """Infer the provider tag; ``custom`` when unmatched, ``unknown`` when empty."""
    if not _lowered(model_id):
        return PROVIDER_UNKNOWN
    return first_match(PROVIDER_RULES, model_id) or PROVIDER_CUSTOM


def describe_model(model_id: Optional[str]) -> str:
    """Return an emoji-prefixed description, generic when empty or unmatched."""
    return first_match(DESCRIPTION_RULES, model_id) or GENERIC_DESCRIPTION


def classify_speed(model_id: Optional[str]) -> str:
    """Return ``fast``, ``medium`` or ``slow``; unmatched ids are ``medium``."""
    return first_match(SPEED_RULES, model_id) or SPEED_MEDIUM


__all__ = [
    "Rule",
    "PROVIDERS",
    "PROVIDER_RULES",
    "DESCRIPTION_RULES",
    "SPEED_RULES",
    "GENERIC_DESCRIPTION",
    "first_match",
    "classify_provider",
    "describe_model",
    "classify_speed",
]
