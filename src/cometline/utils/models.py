"""Model display names and context limits."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelInfo:
    """Information about a specific model."""

    display_name: str
    context_limit: int


DEFAULT_CONTEXT_LIMIT = 200000
EXTENDED_CONTEXT_LIMIT = 1000000

MODEL_INFO: dict[str, ModelInfo] = {
    "claude-3-haiku-20240307": ModelInfo("Haiku 3", 200000),
    "claude-3-opus-20240229": ModelInfo("Opus 3", 200000),
    "claude-3-5-haiku": ModelInfo("Haiku 3.5", 200000),
    "claude-3-5-haiku-20241022": ModelInfo("Haiku 3.5", 200000),
    "claude-3-5-sonnet": ModelInfo("Sonnet 3.5", 200000),
    "claude-3-5-sonnet-20240620": ModelInfo("Sonnet 3.5", 200000),
    "claude-3-5-sonnet-20241022": ModelInfo("Sonnet 3.5", 200000),
    "claude-3-7-sonnet": ModelInfo("Sonnet 3.7", 200000),
    "claude-3-7-sonnet-20250219": ModelInfo("Sonnet 3.7", 200000),
    "claude-sonnet-4": ModelInfo("Sonnet 4", 200000),
    "claude-sonnet-4-20250514": ModelInfo("Sonnet 4", 200000),
    "claude-sonnet-4-20250514[1m]": ModelInfo("Sonnet 4 (1M context)", 1000000),
    "claude-sonnet-4-5": ModelInfo("Sonnet 4.5", 200000),
    "claude-sonnet-4-5-20250929": ModelInfo("Sonnet 4.5", 200000),
    "claude-sonnet-4-5-20250929[1m]": ModelInfo("Sonnet 4.5 (1M context)", 1000000),
    "claude-haiku-4-5": ModelInfo("Haiku 4.5", 200000),
    "claude-haiku-4-5-20251001": ModelInfo("Haiku 4.5", 200000),
    "claude-opus-4": ModelInfo("Opus 4", 200000),
    "claude-opus-4-20250514": ModelInfo("Opus 4", 200000),
    "claude-opus-4-1": ModelInfo("Opus 4.1", 200000),
    "claude-opus-4-1-20250805": ModelInfo("Opus 4.1", 200000),
    "claude-opus-4-5": ModelInfo("Opus 4.5", 200000),
    "claude-opus-4-5-20251101": ModelInfo("Opus 4.5", 200000),
}


def get_display_name(model_id: str) -> str:
    """Map a raw model id to its short name; unknown ids pass through."""
    info = MODEL_INFO.get(model_id)
    return info.display_name if info else model_id


def get_context_limit(model_id: str) -> int:
    """Get the context limit for a model.

    Args:
        model_id: Model identifier (e.g., "claude-sonnet-4-5-20250929")

    Returns:
        Context limit in tokens; unknown models get the fallback limit,
        ids carrying the 1M marker get the extended limit
    """
    info = MODEL_INFO.get(model_id)
    if info:
        return info.context_limit
    if "[1m]" in model_id.lower():
        return EXTENDED_CONTEXT_LIMIT
    return DEFAULT_CONTEXT_LIMIT
