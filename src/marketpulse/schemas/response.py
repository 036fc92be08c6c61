"""
Response-related Pydantic schemas.

These schemas carry plaintext answers only as far as the ledger's range
checks; nothing here is ever stored.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, StrictInt

from marketpulse.models.response_fields import FIELD_NAMES


class ResponseSubmission(BaseModel):
    """Plaintext answers for one submission, prior to sealing."""

    age: StrictInt
    gender: StrictInt
    income: StrictInt
    rating: StrictInt
    purchase_intent: StrictInt
    brand_awareness: StrictInt

    def answers(self) -> dict[str, int]:
        """Answers keyed by field name, in submission order."""
        return {name: getattr(self, name) for name in FIELD_NAMES}

    def __repr__(self) -> str:
        # Plaintext answers stay out of logs and tracebacks
        return "ResponseSubmission(<redacted>)"

    __str__ = __repr__


class MarketInsights(BaseModel):
    """Insights summary visible to the survey creator and platform owner."""

    survey_id: int
    total_responses: int = 0
    last_updated: Optional[datetime] = None
    insights_generated: bool = False

    model_config = {"from_attributes": True}
