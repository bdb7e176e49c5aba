"""Environment-based configuration for the API service."""

import logging
import os

from ..extraction.providers import DEFAULT_MODEL_CHAIN

logger = logging.getLogger(__name__)


class Settings:
    """API configuration loaded from environment variables."""

    def __init__(self):
        self.api_secret = os.getenv("QS_API_SECRET", "")
        if not self.api_secret:
            raise RuntimeError(
                "QS_API_SECRET environment variable is required. "
                "Generate one with: openssl rand -hex 32"
            )
        self.host = os.getenv("QS_API_HOST", "0.0.0.0")
        self.port = int(os.getenv("QS_API_PORT", "8000"))
        self.debug = os.getenv("QS_ENGINE_ENV", "production") != "production"

        # Signal provider
        self.gemini_api_key = os.getenv("QS_GEMINI_API_KEY", "")
        models = os.getenv("QS_GEMINI_MODELS", "")
        self.gemini_models = [m.strip() for m in models.split(",") if m.strip()] or list(DEFAULT_MODEL_CHAIN)
        self.provider_timeout = float(os.getenv("QS_PROVIDER_TIMEOUT", "60"))
        self.use_mock_provider = (
            os.getenv("QS_USE_MOCK_PROVIDER", "false").lower() == "true"
        )
        if not self.gemini_api_key and not self.use_mock_provider:
            logger.warning("No signal provider configured; /v1/scans/analyze will be unavailable")


_settings = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Drop cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Lazy proxy so settings aren't loaded until first access."""

    def __getattr__(self, name):
        return getattr(_get_settings(), name)


settings = _SettingsProxy()
