"""Document signal extraction (external model integrations)."""

from .providers import (
    BaseSignalProvider,
    GeminiSignalProvider,
    MockSignalProvider,
    ProviderError,
    classify_provider_error,
    get_provider,
)
from .rubric import EXTRACTION_RUBRIC, SIGNALS_RESPONSE_SCHEMA, build_user_prompt

__all__ = [
    "BaseSignalProvider",
    "GeminiSignalProvider",
    "MockSignalProvider",
    "ProviderError",
    "classify_provider_error",
    "get_provider",
    "EXTRACTION_RUBRIC",
    "SIGNALS_RESPONSE_SCHEMA",
    "build_user_prompt",
]
