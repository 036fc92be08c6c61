"""
Survey repository for the registry's records.

Holds survey documents and their participant indexes in memory.
Durability is provided by the execution environment the core runs on.
"""

from typing import Optional

from marketpulse.models.documents import ParticipantIndex, SurveyDocument


class SurveyRepository:
    """Repository for survey records and participant indexes."""

    def __init__(self) -> None:
        self._surveys: dict[int, SurveyDocument] = {}
        self._participants: dict[int, ParticipantIndex] = {}
        self._current_id = 0

    @property
    def current_id(self) -> int:
        """Highest identifier allocated so far (0 when empty)."""
        return self._current_id

    def allocate_id(self) -> int:
        """Allocate the next survey identifier."""
        self._current_id += 1
        return self._current_id

    def get_by_id(self, survey_id: int) -> Optional[SurveyDocument]:
        """Get a survey by ID."""
        return self._surveys.get(survey_id)

    def add(self, survey: SurveyDocument) -> SurveyDocument:
        """Store a new survey and its empty participant index."""
        if survey.id in self._surveys:
            raise ValueError(f"Survey {survey.id} already stored")
        self._surveys[survey.id] = survey
        self._participants[survey.id] = ParticipantIndex(survey_id=survey.id)
        return survey

    def save(self, survey: SurveyDocument) -> SurveyDocument:
        """Replace a stored survey."""
        if survey.id not in self._surveys:
            raise KeyError(survey.id)
        self._surveys[survey.id] = survey
        return survey

    def append_participant(self, survey_id: int, participant: str) -> None:
        self._participants[survey_id].participants.append(participant)

    def count_participants(self, survey_id: int) -> int:
        index = self._participants.get(survey_id)
        return len(index.participants) if index else 0
