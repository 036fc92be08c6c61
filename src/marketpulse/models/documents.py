"""
Document models for MarketPulse.

These Pydantic models define the records kept by the survey core.
Persistence and replication belong to the execution environment the
core runs on; repositories hold these documents keyed as below.

Record Strategy:
- surveys: Survey metadata and lifecycle (key: survey id)
- participants: Ordered participant index (key: survey id)
- responses: Sealed responses (key: survey id x participant)
- insights: Insights summary (key: survey id)
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from marketpulse.core.sealing import SealedValue

# ============================================================================
# Enums
# ============================================================================


class SurveyStatus(str, Enum):
    """Survey lifecycle state. Every state other than ACTIVE is absorbing."""

    ACTIVE = "active"  # Accepting responses inside its window
    CAPACITY_REACHED = "capacity_reached"  # Closed by the submission that filled it
    CLOSED = "closed"  # Closed by its creator or the platform owner
    EMERGENCY_STOPPED = "emergency_stopped"  # Halted by the platform owner


# ============================================================================
# Survey Documents
# ============================================================================


class SurveyDocument(BaseModel):
    """
    Survey record owned by the registry.

    title, max_responses and creator never change after creation.
    current_responses only grows and never exceeds max_responses.
    """

    id: int
    title: str
    start_time: datetime
    end_time: datetime
    is_active: bool = True
    status: SurveyStatus = SurveyStatus.ACTIVE
    max_responses: int
    current_responses: int = 0
    creator: str
    created_at: datetime

    @property
    def is_full(self) -> bool:
        return self.current_responses >= self.max_responses


# ============================================================================
# Response Documents
# ============================================================================


class EncryptedResponseDocument(BaseModel):
    """
    Sealed response stored by the ledger.

    At most one per (survey_id, participant). Each field holds a
    SealedValue whose access list is the storage owner and the creator.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    survey_id: int
    participant: str
    fields: dict[str, SealedValue]
    timestamp: datetime
    has_responded: bool = True


class MarketInsightsDocument(BaseModel):
    """
    Insights summary for a closed survey.

    An unset record (never generated) reports zero responses, no
    timestamp and insights_generated=False.
    """

    survey_id: int
    total_responses: int = 0
    last_updated: Optional[datetime] = None
    insights_generated: bool = False


class ParticipantIndex(BaseModel):
    """Append-only participant list for one survey, in submission order."""

    survey_id: int
    participants: list[str] = Field(default_factory=list)
