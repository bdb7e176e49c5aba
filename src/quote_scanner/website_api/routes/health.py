"""Health check routes."""

from fastapi import APIRouter

from ... import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "service": "quote-scanner-api", "version": __version__}


@router.get("/ready")
async def ready():
    """Readiness check - verifies a signal provider is configured."""
    from ..services.analysis import get_signal_provider
    from ...extraction.providers import ProviderError

    try:
        provider = get_signal_provider()
        return {"status": "ready", "provider": provider.provider_name}
    except ProviderError as e:
        return {"status": "not_ready", "detail": str(e)}
