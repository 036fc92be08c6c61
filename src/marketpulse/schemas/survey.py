"""
Survey-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import AwareDatetime, BaseModel, Field

from marketpulse.models.documents import SurveyStatus


class SurveyCreate(BaseModel):
    """Schema for creating a new survey."""

    title: str = Field(..., min_length=1)
    duration_seconds: int = Field(..., gt=0, description="Length of the response window")
    max_responses: int = Field(..., gt=0, le=2**32 - 1, description="Response cap")
    start_time: Optional[AwareDatetime] = Field(
        None, description="When the window opens (defaults to now)"
    )


class SurveyInfo(BaseModel):
    """Public survey metadata."""

    id: int
    title: str
    creator: str
    start_time: datetime
    end_time: datetime
    is_active: bool
    status: SurveyStatus
    max_responses: int
    current_responses: int

    model_config = {"from_attributes": True}
