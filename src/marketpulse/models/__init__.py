"""Survey core record models."""

from marketpulse.models.documents import (
    EncryptedResponseDocument,
    MarketInsightsDocument,
    ParticipantIndex,
    SurveyDocument,
    SurveyStatus,
)
from marketpulse.models.events import (
    InsightsGenerated,
    ResponseSubmitted,
    SurveyCompleted,
    SurveyCreated,
    SurveyEvent,
)
from marketpulse.models.response_fields import RESPONSE_FIELDS, ResponseField

__all__ = [
    "SurveyDocument",
    "SurveyStatus",
    "EncryptedResponseDocument",
    "MarketInsightsDocument",
    "ParticipantIndex",
    "SurveyEvent",
    "SurveyCreated",
    "ResponseSubmitted",
    "SurveyCompleted",
    "InsightsGenerated",
    "RESPONSE_FIELDS",
    "ResponseField",
]
