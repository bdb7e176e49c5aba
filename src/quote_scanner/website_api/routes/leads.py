"""Lead value route."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from ..middleware.auth import verify_signature
from ..schemas.lead import ErrorResponse, LeadValueRequest, LeadValueResponse
from ..services.analysis import lead_value

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/leads", tags=["leads"])


@router.post(
    "/value",
    response_model=LeadValueResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
)
async def value(payload: LeadValueRequest, _auth=Depends(verify_signature)):
    """Calculate a lead's monetary value and tier from funnel answers.

    The value is forwarded to ad platforms as the conversion value.
    """
    try:
        result = lead_value(
            is_homeowner=payload.is_homeowner,
            window_count=payload.window_count,
            timeline=payload.timeline,
            sms_verified=payload.sms_verified,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"success": False, "error": "validation_error", "detail": str(e)},
        )

    return LeadValueResponse(
        value=result.value,
        tier=result.tier.value,
        reasoning=result.reasoning,
        isDisqualified=result.is_disqualified,
    )
