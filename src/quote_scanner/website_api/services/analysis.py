"""Scan and lead value processing logic."""

import base64
import binascii
import logging
from typing import Any, Dict, Optional

from ..config import settings
from ...core.lead_value import QualificationFactors, ValueResult, calculate_lead_value
from ...core.scorer import QuoteScorer, ScoreReport
from ...core.signals import QuoteSignals
from ...extraction.providers import BaseSignalProvider, get_provider

logger = logging.getLogger(__name__)

MAX_DOCUMENT_BYTES = 10 * 1024 * 1024

_scorer = QuoteScorer()


def get_signal_provider() -> BaseSignalProvider:
    """Provider for the current settings. Raises ProviderError when none is configured."""
    return get_provider(
        api_key=settings.gemini_api_key,
        models=settings.gemini_models,
        timeout=settings.provider_timeout,
        use_mock=settings.use_mock_provider,
    )


def score_signals(payload: Dict[str, Any]) -> ScoreReport:
    """Score a provider response that the caller already holds.

    Raises ValueError (SignalParseError) for malformed signals.
    """
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")

    hint = payload.get("openingCountHint")
    if hint is not None and (isinstance(hint, bool) or not isinstance(hint, (int, float))):
        raise ValueError("openingCountHint must be a number or null")

    signals = QuoteSignals.from_dict(payload)
    report = _scorer.score(signals, hint)
    logger.info(f"Scored quote: overall={report.overall_score} graded={report.is_graded}")
    return report


def analyze_document(
    file_data: str,
    mime_type: str,
    opening_count_hint: Optional[float] = None,
    area_name: Optional[str] = None,
    provider: Optional[BaseSignalProvider] = None,
) -> ScoreReport:
    """Decode an uploaded document, extract its signals and score them.

    Raises ValueError for a bad upload and ProviderError for extraction failures.
    """
    if "," in file_data and file_data.startswith("data:"):
        # Strip a data URL prefix ("data:image/jpeg;base64,")
        file_data = file_data.split(",", 1)[1]

    try:
        document = base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("fileData is not valid base64")

    if not document:
        raise ValueError("Uploaded document is empty")
    if len(document) > MAX_DOCUMENT_BYTES:
        raise ValueError("Uploaded document exceeds 10 MB")

    provider = provider or get_signal_provider()
    logger.info(f"Analyzing {mime_type} quote ({len(document)} bytes) with {provider.provider_name}")
    report = provider.analyze(document, mime_type, opening_count_hint, area_name)
    logger.info(f"Analysis complete: overall={report.overall_score}")
    return report


def lead_value(
    is_homeowner: Any = None,
    window_count: Optional[str] = None,
    timeline: Optional[str] = None,
    sms_verified: bool = False,
) -> ValueResult:
    """Classify a lead from funnel answers. Raises ValueError for unknown answers."""
    factors = QualificationFactors.from_answers(
        is_homeowner=is_homeowner,
        window_count=window_count,
        timeline=timeline,
        sms_verified=sms_verified,
    )
    result = calculate_lead_value(factors)
    logger.info(f"Lead value: ${result.value} ({result.tier.value})")
    return result
