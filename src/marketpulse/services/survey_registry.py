"""
Survey Registry Service

Owns survey records and their lifecycle:
- Creates surveys and allocates their identifiers
- Closes surveys manually, on capacity, or by emergency stop
- Records accepted submissions and the participant index

Lifecycle:
    ACTIVE -> CAPACITY_REACHED | CLOSED | EMERGENCY_STOPPED
Every inactive state is final; there is no reopening.
"""

from datetime import datetime, timedelta
from typing import Optional

import structlog
from pydantic import ValidationError

from marketpulse.core.access import AccessGate, Principal
from marketpulse.core.clock import Clock, utc_now
from marketpulse.core.config import MAX_SURVEY_ID
from marketpulse.core.exceptions import (
    AlreadyClosedError,
    InvalidInputError,
    SurveyFullError,
    SurveyNotFoundError,
)
from marketpulse.models.documents import SurveyDocument, SurveyStatus
from marketpulse.models.events import SurveyCompleted, SurveyCreated
from marketpulse.repositories.survey_repository import SurveyRepository
from marketpulse.schemas.survey import SurveyCreate, SurveyInfo
from marketpulse.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)


class SurveyRegistry:
    """
    Manages survey records and lifecycle transitions.

    Other components read surveys through get_survey(), which returns a
    copy; only this class mutates stored surveys.
    """

    def __init__(
        self,
        repository: SurveyRepository,
        gate: AccessGate,
        notifications: NotificationService,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.gate = gate
        self.notifications = notifications
        self.clock = clock

    def create_survey(
        self,
        caller: Principal,
        title: str,
        duration_seconds: int,
        max_responses: int,
        start_time: Optional[datetime] = None,
    ) -> int:
        """
        Create a survey owned by the caller.

        Args:
            caller: Principal creating the survey (becomes its creator)
            title: Non-empty survey title
            duration_seconds: Length of the response window, > 0
            max_responses: Response cap, > 0
            start_time: When the window opens (defaults to now)

        Returns:
            The new survey's identifier
        """
        try:
            params = SurveyCreate(
                title=title,
                duration_seconds=duration_seconds,
                max_responses=max_responses,
                start_time=start_time,
            )
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            logger.info("survey_creation_rejected", caller=caller, errors=errors)
            raise InvalidInputError(f"Invalid survey parameters: {errors}") from e

        now = self.clock()
        start = params.start_time or now
        if start < now:
            raise InvalidInputError("Survey start time cannot be in the past")

        try:
            end_time = start + timedelta(seconds=params.duration_seconds)
        except OverflowError as e:
            raise InvalidInputError("Survey duration exceeds the supported time range") from e

        if self.repository.current_id >= MAX_SURVEY_ID:
            raise InvalidInputError("Survey identifier space is exhausted")

        survey_id = self.repository.allocate_id()
        survey = SurveyDocument(
            id=survey_id,
            title=params.title,
            start_time=start,
            end_time=end_time,
            max_responses=params.max_responses,
            creator=caller,
            created_at=now,
        )
        self.repository.add(survey)

        logger.info(
            "survey_registered",
            survey_id=survey_id,
            creator=caller,
            max_responses=survey.max_responses,
            end_time=survey.end_time.isoformat(),
        )
        self.notifications.emit(
            SurveyCreated(survey_id=survey_id, title=survey.title, creator=caller)
        )

        return survey_id

    def close_survey(self, caller: Principal, survey_id: int) -> None:
        """Manually close an active survey (creator or platform owner)."""
        survey = self._load(survey_id)
        self.gate.require_creator_or_owner(survey, caller, "close this survey")

        if not survey.is_active:
            raise AlreadyClosedError(f"Survey {survey_id} is already closed", survey_id=survey_id)

        survey.is_active = False
        survey.status = SurveyStatus.CLOSED
        survey.end_time = self.clock()
        self.repository.save(survey)

        logger.info(
            "survey_closed",
            survey_id=survey_id,
            closed_by=caller,
            total_responses=survey.current_responses,
        )
        self.notifications.emit(
            SurveyCompleted(survey_id=survey_id, total_responses=survey.current_responses)
        )

    def emergency_stop(self, caller: Principal, survey_id: int) -> None:
        """
        Halt a survey immediately (platform owner only).

        Applies to inactive surveys too: the end time is reset to now.
        No notification is emitted.
        """
        self.gate.require_owner(caller, "emergency stop a survey", survey_id=survey_id)
        survey = self._load(survey_id)

        was_active = survey.is_active
        survey.is_active = False
        if was_active:
            survey.status = SurveyStatus.EMERGENCY_STOPPED
        survey.end_time = self.clock()
        self.repository.save(survey)

        logger.warning(
            "survey_emergency_stopped",
            survey_id=survey_id,
            was_active=was_active,
            status=survey.status.value,
        )

    def record_submission(self, survey_id: int, participant: Principal) -> SurveyDocument:
        """
        Count an accepted submission.

        Appends the participant to the index and increments the counter.
        The submission that reaches the cap closes the survey in the
        same step and emits the completion notification.
        """
        survey = self._load(survey_id)
        if survey.is_full:
            raise SurveyFullError(f"Survey {survey_id} is full", survey_id=survey_id)

        self.repository.append_participant(survey_id, participant)
        survey.current_responses += 1

        if survey.is_full:
            survey.is_active = False
            survey.status = SurveyStatus.CAPACITY_REACHED
            logger.info(
                "survey_capacity_reached",
                survey_id=survey_id,
                total_responses=survey.current_responses,
            )
            self.notifications.emit(
                SurveyCompleted(survey_id=survey_id, total_responses=survey.current_responses)
            )

        self.repository.save(survey)
        return survey.model_copy()

    def find_survey(self, survey_id: int) -> Optional[SurveyDocument]:
        """Copy of a survey, or None if the id was never allocated."""
        survey = self.repository.get_by_id(survey_id)
        return survey.model_copy() if survey else None

    def get_survey(self, survey_id: int) -> SurveyDocument:
        """Copy of a survey; raises SurveyNotFoundError on an unknown id."""
        return self._load(survey_id).model_copy()

    def get_survey_info(self, survey_id: int) -> SurveyInfo:
        return SurveyInfo.model_validate(self._load(survey_id))

    def get_total_surveys(self) -> int:
        return self.repository.current_id

    def get_participant_count(self, survey_id: int) -> int:
        self._load(survey_id)
        return self.repository.count_participants(survey_id)

    def _load(self, survey_id: int) -> SurveyDocument:
        """Stored survey for internal mutation."""
        survey = self.repository.get_by_id(survey_id)
        if survey is None:
            raise SurveyNotFoundError(f"Survey {survey_id} not found", survey_id=survey_id)
        return survey
