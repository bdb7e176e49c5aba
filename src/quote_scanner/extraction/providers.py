"""Signal providers - turn an uploaded quote document into QuoteSignals."""

import base64
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..core.scorer import QuoteScorer, ScoreReport
from ..core.signals import QuoteSignals, SignalParseError
from .rubric import EXTRACTION_RUBRIC, SIGNALS_RESPONSE_SCHEMA, build_user_prompt

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

# Tried in order until one succeeds
DEFAULT_MODEL_CHAIN = [
    "gemini-2.0-pro",
    "gemini-1.5-pro",
    "gemini-1.5-flash",
]


class ProviderError(Exception):
    """Signal extraction failed before any scoring could happen."""

    def __init__(self, message: str, reason: str = "UNKNOWN_ERROR"):
        super().__init__(message)
        self.reason = reason


def classify_provider_error(error: BaseException) -> str:
    """Classify a provider failure for logs and API error bodies."""
    if isinstance(error, requests.Timeout):
        return "TIMEOUT: Request took too long - model may be overloaded"
    if isinstance(error, SignalParseError):
        return f"INVALID_RESPONSE: {error}"

    if isinstance(error, requests.HTTPError) and error.response is not None:
        # The message embeds the request URL; classify by status only
        status = error.response.status_code
        if status == 404:
            return "MODEL_NOT_FOUND: Model ID may be retired or unavailable in your region"
        if status == 403:
            return "PERMISSION_DENIED: API key may lack access to this model tier"
        if status == 429:
            return "QUOTA_EXCEEDED: Rate limit or quota exceeded - consider upgrading API tier"
        if status >= 500:
            return "SERVER_ERROR: Model service temporarily unavailable"
        if status == 400 and "location" in error.response.text.lower():
            return "LOCATION_NOT_SUPPORTED: Model not available in your geographic region"
        return f"UNKNOWN_ERROR: HTTP {status}"

    message = str(error).lower()

    if "not found" in message:
        return "MODEL_NOT_FOUND: Model ID may be retired or unavailable in your region"
    if "permission" in message:
        return "PERMISSION_DENIED: API key may lack access to this model tier"
    if "quota" in message or "rate limit" in message:
        return "QUOTA_EXCEEDED: Rate limit or quota exceeded - consider upgrading API tier"
    if "location" in message or "region" in message:
        return "LOCATION_NOT_SUPPORTED: Model not available in your geographic region"
    if "timeout" in message or "deadline" in message:
        return "TIMEOUT: Request took too long - model may be overloaded"
    if isinstance(error, requests.RequestException):
        # Transport errors echo the request URL
        return f"UNKNOWN_ERROR: {type(error).__name__}"
    return f"UNKNOWN_ERROR: {error}"


class BaseSignalProvider(ABC):
    """Base class for document-understanding providers."""

    provider_name: str = "unknown"

    def __init__(self, scorer: Optional[QuoteScorer] = None):
        self.scorer = scorer or QuoteScorer()

    @abstractmethod
    def extract(
        self,
        document: bytes,
        mime_type: str,
        opening_count_hint: Optional[float] = None,
        area_name: Optional[str] = None,
    ) -> QuoteSignals:
        """Extract signals from a document. Raises ProviderError on failure."""
        pass

    def analyze(
        self,
        document: bytes,
        mime_type: str,
        opening_count_hint: Optional[float] = None,
        area_name: Optional[str] = None,
    ) -> ScoreReport:
        """Extract signals and score them."""
        signals = self.extract(document, mime_type, opening_count_hint, area_name)
        return self.scorer.score(signals, opening_count_hint)


class MockSignalProvider(BaseSignalProvider):
    """Returns a fixed signal set; used for demos and when no API key is configured."""

    provider_name = "mock"

    SAMPLE_SIGNALS = QuoteSignals(
        is_valid_quote=True,
        validity_reason="",
        total_price_found=True,
        total_price_value=17400,
        opening_count_estimate=12,
        has_compliance_keyword=True,
        has_compliance_identifier=True,
        has_laminated_mention=True,
        has_permit_mention=True,
        has_demo_install_detail=True,
        has_specific_materials=True,
        has_finish_detail=True,
        has_brand_clarity=True,
        deposit_percentage=30,
        has_warranty_mention=True,
        has_labor_warranty=False,
        warranty_duration_years=1,
    )

    def __init__(self, signals: Optional[QuoteSignals] = None, scorer: Optional[QuoteScorer] = None):
        super().__init__(scorer)
        self.signals = signals or self.SAMPLE_SIGNALS

    def extract(self, document, mime_type, opening_count_hint=None, area_name=None) -> QuoteSignals:
        logger.info(f"Mock extraction for {mime_type} document ({len(document)} bytes)")
        return self.signals


class GeminiSignalProvider(BaseSignalProvider):
    """Extracts signals with Gemini's generateContent REST API.

    Each model in the chain is tried in turn; a transport failure or an
    unparseable response moves on to the next model.
    """

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        models: Optional[Sequence[str]] = None,
        timeout: float = 60,
        scorer: Optional[QuoteScorer] = None,
    ):
        super().__init__(scorer)
        self.api_key = api_key
        self.models: List[str] = list(models or DEFAULT_MODEL_CHAIN)
        self.timeout = timeout

    def extract(self, document, mime_type, opening_count_hint=None, area_name=None) -> QuoteSignals:
        if not self.api_key:
            raise ProviderError("Gemini API key not configured. Set QS_GEMINI_API_KEY.", reason="NOT_CONFIGURED")

        payload = self._build_payload(document, mime_type, opening_count_hint, area_name)

        last_error: Optional[BaseException] = None
        last_reason = "UNKNOWN_ERROR"
        for model in self.models:
            try:
                logger.info(f"Attempting quote extraction with {model}")
                signals = self._generate(model, payload)
                logger.info(f"Extraction completed with {model}")
                return signals
            except (requests.RequestException, SignalParseError) as e:
                last_error = e
                last_reason = classify_provider_error(e)
                logger.error(f"{model} failed: {last_reason}")

        raise ProviderError(f"All models failed. Last error: {last_reason}", reason=last_reason) from last_error

    def _build_payload(self, document, mime_type, opening_count_hint, area_name) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": EXTRACTION_RUBRIC},
                        {"text": build_user_prompt(opening_count_hint, area_name)},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(document).decode("ascii"),
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": SIGNALS_RESPONSE_SCHEMA,
            },
        }

    def _generate(self, model: str, payload: Dict[str, Any]) -> QuoteSignals:
        response = requests.post(
            f"{GEMINI_BASE_URL}/{model}:generateContent",
            headers={"x-goog-api-key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()

        try:
            text = response.json()["candidates"][0]["content"]["parts"][0]["text"]
            data = json.loads(text)
        except (ValueError, KeyError, IndexError, TypeError):
            logger.error(f"Failed to parse {model} response: {response.text[:500]}")
            raise SignalParseError("Failed to parse AI response")

        return QuoteSignals.from_dict(data)


def get_provider(
    api_key: Optional[str] = None,
    models: Optional[Sequence[str]] = None,
    timeout: float = 60,
    use_mock: bool = False,
) -> BaseSignalProvider:
    """Pick a provider: Gemini when a key is configured, else the mock if allowed."""
    if api_key:
        return GeminiSignalProvider(api_key, models=models, timeout=timeout)
    if use_mock:
        return MockSignalProvider()
    raise ProviderError(
        "No signal provider configured. Set QS_GEMINI_API_KEY or QS_USE_MOCK_PROVIDER=true.",
        reason="NOT_CONFIGURED",
    )
