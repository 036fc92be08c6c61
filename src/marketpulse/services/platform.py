"""
Survey Platform

Public surface of the survey core. Wires the registry, ledger and
insights recorder around shared collaborators and runs every operation
as one serialized transaction:

- One re-entrant whole-state lock held for the whole operation
- Every check happens before any record changes
- Notifications are delivered only after the operation commits

Usage:
    platform = SurveyPlatform(owner="0xowner")
    survey_id = platform.create_survey("0xalice", "Product Feedback", 3600, 100)
    platform.submit_response("0xbob", survey_id, age=3, gender=1, income=2,
                             rating=9, purchase_intent=4, brand_awareness=5)
"""

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional

import structlog
from pydantic import ValidationError

from marketpulse.core.access import AccessGate, Principal
from marketpulse.core.clock import Clock, utc_now
from marketpulse.core.config import settings
from marketpulse.core.exceptions import ConfigurationError, InvalidFieldError, SurveyError
from marketpulse.core.sealing import SealingService, get_sealing_service
from marketpulse.models.documents import EncryptedResponseDocument
from marketpulse.models.events import SurveyEvent
from marketpulse.models.response_fields import FIELDS_BY_NAME
from marketpulse.repositories.response_repository import ResponseRepository
from marketpulse.repositories.survey_repository import SurveyRepository
from marketpulse.schemas.response import MarketInsights, ResponseSubmission
from marketpulse.schemas.survey import SurveyInfo
from marketpulse.services.insights_recorder import InsightsRecorder
from marketpulse.services.notification_service import NotificationService
from marketpulse.services.response_ledger import ResponseLedger
from marketpulse.services.survey_registry import SurveyRegistry

logger = structlog.get_logger(__name__)


class SurveyPlatform:
    """
    Confidential market-research survey platform.

    The platform owner is fixed at construction. Every operation takes
    the authenticated calling principal as ``caller``.
    """

    def __init__(
        self,
        owner: Optional[Principal] = None,
        sealing: Optional[SealingService] = None,
        clock: Clock = utc_now,
    ):
        owner = owner or settings.PLATFORM_OWNER
        if not owner:
            raise ConfigurationError("A platform owner is required (set PLATFORM_OWNER)")

        self._lock = threading.RLock()
        self.clock = clock
        self.gate = AccessGate(owner)
        self.sealing = sealing or get_sealing_service()
        self.notifications = NotificationService()

        self.surveys = SurveyRepository()
        self.responses = ResponseRepository()

        self.registry = SurveyRegistry(self.surveys, self.gate, self.notifications, clock)
        self.ledger = ResponseLedger(
            self.responses, self.registry, self.sealing, self.gate, self.notifications, clock
        )
        self.insights = InsightsRecorder(
            self.responses, self.registry, self.gate, self.notifications, clock
        )

        logger.info("survey_platform_initialized", owner=owner)

    @property
    def owner(self) -> Principal:
        return self.gate.owner

    @contextmanager
    def transaction(self, operation: str) -> Iterator[None]:
        """
        Run an operation atomically.

        Usage:
            with platform.transaction("close_survey"):
                ...
        """
        with self._lock:
            try:
                yield
            except SurveyError as e:
                self.notifications.discard()
                logger.info(
                    "operation_rejected",
                    operation=operation,
                    kind=e.kind,
                    survey_id=e.survey_id,
                    reason=str(e),
                )
                raise
            except Exception:
                self.notifications.discard()
                logger.exception("operation_failed", operation=operation)
                raise
            self.notifications.flush()

    def subscribe(self, callback: Callable[[SurveyEvent], None]) -> Callable[[], None]:
        """Register an observer for committed notifications."""
        return self.notifications.subscribe(callback)

    # ------------------------------------------------------------------
    # Survey registry
    # ------------------------------------------------------------------

    def create_survey(
        self,
        caller: Principal,
        title: str,
        duration_seconds: int,
        max_responses: int,
        start_time: Optional[datetime] = None,
    ) -> int:
        with self.transaction("create_survey"):
            return self.registry.create_survey(
                caller, title, duration_seconds, max_responses, start_time=start_time
            )

    def close_survey(self, caller: Principal, survey_id: int) -> None:
        with self.transaction("close_survey"):
            self.registry.close_survey(caller, survey_id)

    def emergency_stop(self, caller: Principal, survey_id: int) -> None:
        with self.transaction("emergency_stop"):
            self.registry.emergency_stop(caller, survey_id)

    def get_survey_info(self, survey_id: int) -> SurveyInfo:
        with self._lock:
            return self.registry.get_survey_info(survey_id)

    def get_total_surveys(self) -> int:
        with self._lock:
            return self.registry.get_total_surveys()

    def get_participant_count(self, survey_id: int) -> int:
        with self._lock:
            return self.ledger.get_participant_count(survey_id)

    # ------------------------------------------------------------------
    # Response ledger
    # ------------------------------------------------------------------

    def submit_response(
        self,
        caller: Principal,
        survey_id: int,
        *,
        age: int,
        gender: int,
        income: int,
        rating: int,
        purchase_intent: int,
        brand_awareness: int,
    ) -> None:
        answers = {
            "age": age,
            "gender": gender,
            "income": income,
            "rating": rating,
            "purchase_intent": purchase_intent,
            "brand_awareness": brand_awareness,
        }
        with self.transaction("submit_response"):
            try:
                submission = ResponseSubmission(**answers)
            except ValidationError as e:
                name = str(e.errors()[0]["loc"][0])
                field = FIELDS_BY_NAME[name]
                raise InvalidFieldError(
                    name, answers[name], field.low, field.high, survey_id=survey_id
                ) from e
            self.ledger.submit_response(caller, survey_id, submission)

    def has_user_responded(self, survey_id: int, participant: Principal) -> bool:
        with self._lock:
            return self.ledger.has_user_responded(survey_id, participant)

    def is_accepting_responses(self, survey_id: int) -> bool:
        with self._lock:
            return self.ledger.is_accepting_responses(survey_id)

    def get_encrypted_response(
        self, caller: Principal, survey_id: int, participant: Principal
    ) -> Optional[EncryptedResponseDocument]:
        with self._lock:
            return self.ledger.get_encrypted_response(caller, survey_id, participant)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def generate_insights(self, caller: Principal, survey_id: int) -> MarketInsights:
        with self.transaction("generate_insights"):
            return self.insights.generate_insights(caller, survey_id)

    def get_market_insights(self, caller: Principal, survey_id: int) -> MarketInsights:
        with self._lock:
            return self.insights.get_market_insights(caller, survey_id)
