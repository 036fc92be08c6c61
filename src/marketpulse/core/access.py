"""Authorization checks shared by the registry, ledger and insights recorder.

Two authorities exist: the platform owner, fixed when the platform is
built, and each survey's creator. Every privileged operation consults
this gate instead of comparing principals itself.
"""

from typing import TYPE_CHECKING, Optional

import structlog

from marketpulse.core.exceptions import UnauthorizedError

if TYPE_CHECKING:
    from marketpulse.models.documents import SurveyDocument

logger = structlog.get_logger(__name__)

# Opaque, globally unique identity; only equality is meaningful
Principal = str


class AccessGate:
    """Owner and creator-or-owner predicates."""

    def __init__(self, owner: Principal):
        self._owner = owner

    @property
    def owner(self) -> Principal:
        return self._owner

    def is_owner(self, principal: Principal) -> bool:
        """True iff principal is the platform owner."""
        return principal == self._owner

    def is_creator_or_owner(self, survey: "SurveyDocument", principal: Principal) -> bool:
        """True iff principal created the survey or owns the platform."""
        return principal == survey.creator or self.is_owner(principal)

    def require_owner(
        self, principal: Principal, action: str, survey_id: Optional[int] = None
    ) -> None:
        if not self.is_owner(principal):
            logger.warning(
                "authorization_denied",
                action=action,
                survey_id=survey_id,
                caller=principal,
                required="owner",
            )
            raise UnauthorizedError(
                f"Only the platform owner may {action}", survey_id=survey_id
            )

    def require_creator_or_owner(
        self, survey: "SurveyDocument", principal: Principal, action: str
    ) -> None:
        if not self.is_creator_or_owner(survey, principal):
            logger.warning(
                "authorization_denied",
                action=action,
                survey_id=survey.id,
                caller=principal,
                required="creator_or_owner",
            )
            raise UnauthorizedError(
                f"Only the survey creator or platform owner may {action}",
                survey_id=survey.id,
            )
