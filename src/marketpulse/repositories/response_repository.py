"""
Response repository for the ledger's records.

Stores sealed responses keyed by survey and participant, and the
insights summary per survey. Plaintext answers never reach this layer.
"""

from typing import Optional

from marketpulse.models.documents import EncryptedResponseDocument, MarketInsightsDocument


class ResponseRepository:
    """Repository for sealed responses and insights records."""

    def __init__(self) -> None:
        self._responses: dict[tuple[int, str], EncryptedResponseDocument] = {}
        self._insights: dict[int, MarketInsightsDocument] = {}

    def get(self, survey_id: int, participant: str) -> Optional[EncryptedResponseDocument]:
        """Get the sealed response a participant submitted to a survey."""
        return self._responses.get((survey_id, participant))

    def has_responded(self, survey_id: int, participant: str) -> bool:
        """Check if a response exists (for duplicate detection)."""
        response = self.get(survey_id, participant)
        return response is not None and response.has_responded

    def create(self, response: EncryptedResponseDocument) -> EncryptedResponseDocument:
        """
        Store a sealed response.

        NOTE: only sealed values are stored, never plaintext.
        """
        key = (response.survey_id, response.participant)
        if key in self._responses:
            raise ValueError(f"Response already stored for survey {response.survey_id}")
        self._responses[key] = response
        return response

    def get_insights(self, survey_id: int) -> Optional[MarketInsightsDocument]:
        return self._insights.get(survey_id)

    def save_insights(self, insights: MarketInsightsDocument) -> MarketInsightsDocument:
        """Store or overwrite the insights record for a survey."""
        self._insights[insights.survey_id] = insights
        return insights
