"""Catalog of fast models recommended for semantic skill routing.

Models are selected from a list of model ids by naming patterns, so newly
released fast models are picked up without code changes.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

# Highest priority (ultra-fast) and regular fast model keywords
FASTEST_KEYWORDS = ("flash", "lite", "haiku", "nano")
FAST_KEYWORDS = ("mini", "4o-mini", "o1-mini", "o3-mini", "o4-mini")

# Too slow or too expensive for routing
EXCLUDE_KEYWORDS = ("pro", "thinking", "sonnet", "opus", "turbo", "ultra")

# Deprecated model families
_DEPRECATED_RE = re.compile(
    r"claude[-_ ]3[-._]7|3\.5[-_]turbo|gpt[-_ ]?3\.5|llama[-_ ]?2|llama[-_ ]?3(?![._]?[13])",
    re.IGNORECASE,
)

_OPENAI_O_SERIES_RE = re.compile(r"^o\d")
_VERSION_RE = re.compile(r"(\d+(?:\.\d+)*)")

# Known model ids offered by the supported providers
DEFAULT_MODEL_IDS = (
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4.1",
    "gpt-4.1-mini",
    "gpt-4.1-nano",
    "gpt-5-mini",
    "gpt-5-nano",
    "gpt-3.5-turbo",
    "o3-mini",
    "o4-mini",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.5-pro",
    "claude-3-5-haiku",
    "claude-3-7-sonnet",
    "claude-haiku-4-5",
    "claude-sonnet-4-5",
    "claude-opus-4-1",
    "llama3-8b",
    "llama-3.1-8b-instant",
    "mistral-small",
)


@dataclass
class FastModel:
    """Routing model entry shown in the model picker."""

    id: str
    name: str
    description: str
    tier: str  # "fastest" | "fast"
    provider: str  # "OpenAI" | "Google" | "Anthropic" | "Other"


def get_provider(model_id: str) -> str:
    name = model_id.lower()

    if "openai" in name or "gpt" in name or _OPENAI_O_SERIES_RE.match(name):
        return "OpenAI"
    if "google" in name or "gemini" in name:
        return "Google"
    if "anthropic" in name or "claude" in name:
        return "Anthropic"
    return "Other"


def get_speed_tier(model_id: str) -> str:
    name = model_id.lower()
    if any(keyword in name for keyword in FASTEST_KEYWORDS):
        return "fastest"
    return "fast"


def describe_model(model_id: str, tier: str) -> str:
    name = model_id.lower()

    if tier == "fastest":
        if "flash" in name:
            return "Ultra-fast model optimized for agentic experiences and quick responses."
        if "haiku" in name:
            return "Fastest Claude model with large context window for code and text analysis."
        if "nano" in name:
            return "Compact and ultra-fast. Ideal for summarization and classification tasks."
        return "Ultra-fast model optimized for speed and efficiency."

    if "mini" in name:
        return "Fast and intelligent model for everyday tasks. Great balance of speed and quality."
    return "Fast model optimized for efficient routing."


def display_name(model_id: str) -> str:
    """Human-friendly name, e.g. ``gemini-2.5-flash-lite`` -> ``Gemini 2.5 Flash Lite``."""
    words = re.split(r"[-_\s]+", model_id)
    return " ".join(w if any(c.isdigit() for c in w) else w.capitalize() for w in words if w)


def is_routing_candidate(model_id: str) -> bool:
    """True if ``model_id`` is a fast, non-deprecated model."""
    name = model_id.lower()

    if _DEPRECATED_RE.search(name):
        return False
    if any(keyword in name for keyword in EXCLUDE_KEYWORDS):
        return False
    return any(keyword in name for keyword in FASTEST_KEYWORDS + FAST_KEYWORDS)


def get_fast_models(model_ids: Optional[Iterable[str]] = None) -> list[FastModel]:
    """Extract fast routing models from a list of model ids.

    Args:
        model_ids: Candidate ids (defaults to DEFAULT_MODEL_IDS)

    Returns:
        FastModel entries in input order
    """
    models = []
    for model_id in model_ids if model_ids is not None else DEFAULT_MODEL_IDS:
        if not is_routing_candidate(model_id):
            continue

        tier = get_speed_tier(model_id)
        models.append(
            FastModel(
                id=model_id,
                name=display_name(model_id),
                description=describe_model(model_id, tier),
                tier=tier,
                provider=get_provider(model_id),
            )
        )
    return models


FAST_MODELS: list[FastModel] = get_fast_models()


def _version_key(model_id: str) -> tuple[int, ...]:
    match = _VERSION_RE.search(model_id)
    if not match:
        return (0,)
    return tuple(int(part) for part in match.group(1).split("."))


def get_default_model(models: Optional[list[FastModel]] = None) -> str:
    """Get the default routing model.

    Prefers the newest Gemini Flash Lite, then the first fastest-tier model,
    then whatever comes first.

    Raises:
        ValueError: If no fast models are available
    """
    models = FAST_MODELS if models is None else models

    flash_lite = [
        m for m in models
        if "gemini" in m.id.lower() and re.search(r"flash[-_ ]lite", m.id, re.IGNORECASE)
    ]
    if flash_lite:
        return max(flash_lite, key=lambda m: _version_key(m.id)).id

    for model in models:
        if model.tier == "fastest":
            return model.id

    if models:
        return models[0].id

    raise ValueError(
        "No fast models available. Please ensure at least one compatible model is enabled."
    )


def get_model_by_id(model_id: str, models: Optional[list[FastModel]] = None) -> Optional[FastModel]:
    for model in FAST_MODELS if models is None else models:
        if model.id == model_id:
            return model
    return None
