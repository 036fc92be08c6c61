"""
Insights Recorder Service

Writes the terminal summary for a closed survey. The summary records
the final response count and when it was generated; no statistics are
computed over sealed answers here. A real aggregation engine consumes
the sealed values through its own capability grants.
"""

import structlog

from marketpulse.core.access import AccessGate, Principal
from marketpulse.core.clock import Clock, utc_now
from marketpulse.core.exceptions import NoResponsesError, SurveyStillActiveError
from marketpulse.models.documents import MarketInsightsDocument
from marketpulse.models.events import InsightsGenerated
from marketpulse.repositories.response_repository import ResponseRepository
from marketpulse.schemas.response import MarketInsights
from marketpulse.services.notification_service import NotificationService
from marketpulse.services.survey_registry import SurveyRegistry

logger = structlog.get_logger(__name__)


class InsightsRecorder:
    """Generates and serves insights records for closed surveys."""

    def __init__(
        self,
        repository: ResponseRepository,
        registry: SurveyRegistry,
        gate: AccessGate,
        notifications: NotificationService,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.registry = registry
        self.gate = gate
        self.notifications = notifications
        self.clock = clock

    def generate_insights(self, caller: Principal, survey_id: int) -> MarketInsights:
        """
        Record insights for a closed survey.

        Calling again on the same survey overwrites the record with the
        same count and a fresh timestamp.
        """
        survey = self.registry.get_survey(survey_id)
        self.gate.require_creator_or_owner(survey, caller, "generate insights")

        if survey.is_active:
            raise SurveyStillActiveError(
                f"Survey {survey_id} is still active", survey_id=survey_id
            )
        if survey.current_responses == 0:
            raise NoResponsesError(f"Survey {survey_id} has no responses", survey_id=survey_id)

        now = self.clock()
        previous = self.repository.get_insights(survey_id)
        insights = self.repository.save_insights(
            MarketInsightsDocument(
                survey_id=survey_id,
                total_responses=survey.current_responses,
                last_updated=now,
                insights_generated=True,
            )
        )

        logger.info(
            "insights_recorded",
            survey_id=survey_id,
            total_responses=insights.total_responses,
            regenerated=previous is not None,
        )
        self.notifications.emit(InsightsGenerated(survey_id=survey_id, timestamp=now))

        return MarketInsights.model_validate(insights)

    def get_market_insights(self, caller: Principal, survey_id: int) -> MarketInsights:
        survey = self.registry.get_survey(survey_id)
        self.gate.require_creator_or_owner(survey, caller, "view insights")

        insights = self.repository.get_insights(survey_id)
        if insights is None:
            return MarketInsights(survey_id=survey_id)
        return MarketInsights.model_validate(insights)
