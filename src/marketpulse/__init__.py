"""
MarketPulse

Confidential market-research surveys: creators open capped, time-boxed
surveys; participants answer once with categorical answers that are
sealed on arrival and readable only by the survey creator and the
platform's own storage.
"""

from marketpulse.services.platform import SurveyPlatform

__version__ = "1.0.0"

__all__ = ["SurveyPlatform", "__version__"]
