"""Pydantic models for quote scan request/response."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    file_data: str = Field(..., alias="fileData", description="Base64-encoded quote image or PDF")
    mime_type: str = Field(..., alias="mimeType")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    opening_count_hint: Optional[float] = Field(default=None, alias="openingCountHint", gt=0)
    area_name: Optional[str] = Field(default=None, alias="areaName")


class ScoreReportResponse(BaseModel):
    overallScore: int
    safetyScore: int
    scopeScore: int
    priceScore: int
    finePrintScore: int
    warrantyScore: int
    pricePerOpening: str
    warnings: List[str]
    missingItems: List[str]
    summary: str
    rawSignals: Optional[Dict[str, Any]] = None
