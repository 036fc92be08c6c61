"""Schemas module initialization."""

from marketpulse.schemas.response import MarketInsights, ResponseSubmission
from marketpulse.schemas.survey import SurveyCreate, SurveyInfo

__all__ = [
    "SurveyCreate",
    "SurveyInfo",
    "ResponseSubmission",
    "MarketInsights",
]
