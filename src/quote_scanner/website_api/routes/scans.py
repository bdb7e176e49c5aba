"""Quote scan routes."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from ..middleware.auth import verify_signature
from ..schemas.lead import ErrorResponse
from ..schemas.scan import AnalyzeRequest, ScoreReportResponse
from ..services.analysis import analyze_document, score_signals
from ...extraction.providers import ProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/scans", tags=["scans"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/score", response_model=ScoreReportResponse, responses=ERROR_RESPONSES)
async def score(request: Request, include_signals: bool = False, _auth=Depends(verify_signature)):
    """Score signals already extracted from a quote.

    The body is the provider's JSON signal object, optionally with
    ``openingCountHint`` from the homeowner.
    """
    try:
        body = await request.json()
    except Exception:
        raise HTTPException(
            status_code=400,
            detail={"success": False, "error": "validation_error", "detail": "Invalid JSON body"},
        )

    try:
        report = score_signals(body)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"success": False, "error": "validation_error", "detail": str(e)},
        )
    return report.to_dict(include_signals=include_signals)


@router.post(
    "/analyze",
    response_model=ScoreReportResponse,
    responses={**ERROR_RESPONSES, 502: {"model": ErrorResponse}},
)
def analyze(payload: AnalyzeRequest, include_signals: bool = False, _auth=Depends(verify_signature)):
    """Extract signals from an uploaded quote and score them.

    Runs in the threadpool; the provider call blocks on the network.
    """
    try:
        report = analyze_document(
            payload.file_data,
            payload.mime_type,
            opening_count_hint=payload.opening_count_hint,
            area_name=payload.area_name,
        )
    except ProviderError as e:
        logger.error(f"Signal extraction failed: {e.reason}")
        raise HTTPException(
            status_code=502,
            detail={"success": False, "error": "provider_error", "detail": str(e)},
        )
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"success": False, "error": "validation_error", "detail": str(e)},
        )
    except Exception:
        logger.exception("Quote analysis error")
        raise HTTPException(
            status_code=500,
            detail={"success": False, "error": "server_error", "detail": "Internal processing error"},
        )
    return report.to_dict(include_signals=include_signals)
