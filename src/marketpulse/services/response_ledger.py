"""
Response Ledger Service

Accepts one sealed response per participant per survey.

Submission pipeline (each check is a distinct rejection):
1. Survey is active
2. Current time is inside the survey window
3. Caller has not responded yet
4. Every plaintext answer is inside its range
5. Survey is below capacity

Only after every check passes are the answers sealed. Each sealed
field is granted to exactly two principals, the storage owner and the
survey creator, and its access list is then frozen. The participant
keeps no capability on their own answers.
"""

from datetime import datetime
from typing import Optional

import structlog

from marketpulse.core.access import AccessGate, Principal
from marketpulse.core.clock import Clock, utc_now
from marketpulse.core.exceptions import (
    DuplicateResponseError,
    InvalidFieldError,
    SurveyEndedError,
    SurveyFullError,
    SurveyInactiveError,
    SurveyNotStartedError,
)
from marketpulse.core.sealing import SealedValue, SealingService
from marketpulse.models.documents import EncryptedResponseDocument, SurveyDocument
from marketpulse.models.events import ResponseSubmitted
from marketpulse.models.response_fields import RESPONSE_FIELDS
from marketpulse.repositories.response_repository import ResponseRepository
from marketpulse.schemas.response import ResponseSubmission
from marketpulse.services.notification_service import NotificationService
from marketpulse.services.survey_registry import SurveyRegistry

logger = structlog.get_logger(__name__)


class ResponseLedger:
    """Validates, seals and records survey responses."""

    def __init__(
        self,
        repository: ResponseRepository,
        registry: SurveyRegistry,
        sealing: SealingService,
        gate: AccessGate,
        notifications: NotificationService,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.registry = registry
        self.sealing = sealing
        self.gate = gate
        self.notifications = notifications
        self.clock = clock

    def submit_response(
        self,
        caller: Principal,
        survey_id: int,
        submission: ResponseSubmission,
    ) -> EncryptedResponseDocument:
        """
        Seal and record the caller's response to a survey.

        Args:
            caller: Participant submitting the response
            survey_id: Target survey
            submission: Plaintext answers

        Returns:
            The stored sealed response
        """
        now = self.clock()
        survey = self._check_accepting(self.registry.find_survey(survey_id), survey_id, now)

        if self.repository.has_responded(survey_id, caller):
            logger.info("response_rejected", survey_id=survey_id, reason="duplicate")
            raise DuplicateResponseError(
                f"Participant already responded to survey {survey_id}", survey_id=survey_id
            )

        answers = submission.answers()
        for field in RESPONSE_FIELDS:
            value = answers[field.name]
            if not field.accepts(value):
                logger.info(
                    "response_rejected",
                    survey_id=survey_id,
                    reason="invalid_field",
                    field=field.name,
                )
                raise InvalidFieldError(
                    field.name, value, field.low, field.high, survey_id=survey_id
                )

        if survey.is_full:
            raise SurveyFullError(f"Survey {survey_id} is full", survey_id=survey_id)

        sealed = {
            field.name: self._seal_field(answers[field.name], field.width, survey.creator)
            for field in RESPONSE_FIELDS
        }

        response = self.repository.create(
            EncryptedResponseDocument(
                survey_id=survey_id,
                participant=caller,
                fields=sealed,
                timestamp=now,
                has_responded=True,
            )
        )
        self.notifications.emit(ResponseSubmitted(survey_id=survey_id, participant=caller))
        updated = self.registry.record_submission(survey_id, caller)

        logger.info(
            "response_recorded",
            survey_id=survey_id,
            current_responses=updated.current_responses,
            max_responses=updated.max_responses,
            survey_active=updated.is_active,
        )

        return response

    def _check_accepting(
        self, survey: Optional[SurveyDocument], survey_id: int, now: datetime
    ) -> SurveyDocument:
        """Lifecycle and window gating, in rejection order. Returns the open survey."""
        if survey is None or not survey.is_active:
            logger.info("response_rejected", survey_id=survey_id, reason="inactive")
            raise SurveyInactiveError(
                f"Survey {survey_id} is not accepting responses", survey_id=survey_id
            )
        if now < survey.start_time:
            raise SurveyNotStartedError(f"Survey {survey_id} has not started", survey_id=survey_id)
        if now > survey.end_time:
            raise SurveyEndedError(f"Survey {survey_id} has ended", survey_id=survey_id)
        return survey

    def _seal_field(self, plaintext: int, width: int, creator: Principal) -> SealedValue:
        value = self.sealing.seal(plaintext, width)
        self.sealing.grant_self_access(value)
        self.sealing.grant_access(value, creator)
        self.sealing.freeze(value)
        return value

    def is_accepting_responses(self, survey_id: int) -> bool:
        """Whether a new participant could submit to the survey right now."""
        survey = self.registry.find_survey(survey_id)
        if survey is None or not survey.is_active or survey.is_full:
            return False
        now = self.clock()
        return survey.start_time <= now <= survey.end_time

    def has_user_responded(self, survey_id: int, participant: Principal) -> bool:
        self.registry.get_survey(survey_id)
        return self.repository.has_responded(survey_id, participant)

    def get_participant_count(self, survey_id: int) -> int:
        return self.registry.get_participant_count(survey_id)

    def get_encrypted_response(
        self, caller: Principal, survey_id: int, participant: Principal
    ) -> Optional[EncryptedResponseDocument]:
        """Sealed response for the creator or platform owner; None if absent."""
        survey = self.registry.get_survey(survey_id)
        self.gate.require_creator_or_owner(survey, caller, "read sealed responses")
        return self.repository.get(survey_id, participant)
