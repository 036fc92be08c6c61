"""
Error kinds raised by the survey core.

Every failure is a caller-visible rejection tied to one precondition.
Nothing is retried internally and no state changes before a raise.
"""

from typing import Optional


class SurveyError(Exception):
    """Base exception for survey operations."""

    kind = "SurveyError"

    def __init__(self, message: str, survey_id: Optional[int] = None):
        super().__init__(message)
        self.survey_id = survey_id


class InvalidInputError(SurveyError):
    """Malformed survey creation parameters."""

    kind = "InvalidInput"


class InvalidFieldError(SurveyError):
    """A submitted plaintext answer is outside its declared range."""

    kind = "InvalidField"

    def __init__(
        self,
        field: str,
        value: object,
        low: int,
        high: int,
        survey_id: Optional[int] = None,
    ):
        super().__init__(
            f"Field '{field}' must be between {low} and {high}",
            survey_id=survey_id,
        )
        self.field = field
        self.value = value
        self.low = low
        self.high = high


class SurveyNotFoundError(SurveyError):
    """Reference to a survey id that was never allocated."""

    kind = "NotFound"


class UnauthorizedError(SurveyError):
    """Caller lacks the authority required for the operation."""

    kind = "Unauthorized"


class SurveyInactiveError(SurveyError):
    """Survey is not accepting responses."""

    kind = "SurveyInactive"


class SurveyNotStartedError(SurveyError):
    """Survey window has not opened yet."""

    kind = "SurveyNotStarted"


class SurveyEndedError(SurveyError):
    """Survey window has already closed."""

    kind = "SurveyEnded"


class SurveyFullError(SurveyError):
    """Survey has reached its response cap."""

    kind = "SurveyFull"


class AlreadyClosedError(SurveyError):
    """Survey was already closed."""

    kind = "AlreadyClosed"


class DuplicateResponseError(SurveyError):
    """Participant has already submitted a response to this survey."""

    kind = "DuplicateResponse"


class SurveyStillActiveError(SurveyError):
    """Insights requested before the survey closed."""

    kind = "SurveyStillActive"


class NoResponsesError(SurveyError):
    """Insights requested for a survey nobody answered."""

    kind = "NoResponses"


class SealingError(Exception):
    """Raised when a value cannot be sealed or its access list cannot change."""

    pass


class AccessDeniedError(SealingError):
    """Principal holds no capability on a sealed value."""

    pass


class ConfigurationError(Exception):
    """Raised when required platform configuration is missing."""

    pass
