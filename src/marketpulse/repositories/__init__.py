"""Repository modules for record storage."""

from marketpulse.repositories.response_repository import ResponseRepository
from marketpulse.repositories.survey_repository import SurveyRepository

__all__ = [
    "SurveyRepository",
    "ResponseRepository",
]
