"""Survey registry, response ledger, insights and notification services."""

from marketpulse.services.insights_recorder import InsightsRecorder
from marketpulse.services.notification_service import NotificationService
from marketpulse.services.platform import SurveyPlatform
from marketpulse.services.response_ledger import ResponseLedger
from marketpulse.services.survey_registry import SurveyRegistry

__all__ = [
    "SurveyPlatform",
    "SurveyRegistry",
    "ResponseLedger",
    "InsightsRecorder",
    "NotificationService",
]
