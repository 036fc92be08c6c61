"""
Notification models emitted by the survey core.

Observers (dashboards, indexers, UIs) receive these after the
operation that produced them has committed.
"""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class SurveyEvent(BaseModel):
    """Base class for survey notifications."""

    model_config = ConfigDict(frozen=True)

    name: ClassVar[str] = "survey_event"

    survey_id: int


class SurveyCreated(SurveyEvent):
    name: ClassVar[str] = "survey_created"

    title: str
    creator: str


class ResponseSubmitted(SurveyEvent):
    name: ClassVar[str] = "response_submitted"

    participant: str


class SurveyCompleted(SurveyEvent):
    """Fired on manual closure and on capacity-triggered closure."""

    name: ClassVar[str] = "survey_completed"

    total_responses: int


class InsightsGenerated(SurveyEvent):
    name: ClassVar[str] = "insights_generated"

    timestamp: datetime
