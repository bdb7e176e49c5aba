"""Pydantic models for lead value request/response."""

from typing import Optional, Union
from pydantic import BaseModel, Field


class LeadValueRequest(BaseModel):
    is_homeowner: Optional[Union[bool, str]] = Field(default=None, alias="isHomeowner")
    window_count: Optional[str] = Field(
        default=None,
        alias="windowCount",
        description="One of: 1-5, 6-10, 11-15, entire_home",
    )
    timeline: Optional[str] = Field(
        default=None,
        description="One of: asap, 1_3_months, 3_6_months, researching",
    )
    sms_verified: bool = Field(default=False, alias="smsVerified")


class LeadValueResponse(BaseModel):
    value: int
    tier: str
    reasoning: str
    isDisqualified: bool


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    detail: str
