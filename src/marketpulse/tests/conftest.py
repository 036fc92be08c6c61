"""
Pytest fixtures for MarketPulse tests.
"""

import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

# Set test environment variables before importing the package
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("PLATFORM_OWNER", "0xplatform-owner")
os.environ.setdefault("LOG_LEVEL", "WARNING")

OWNER = "0xplatform-owner"
CREATOR = "0xcreator"
ALICE = "0xalice"
BOB = "0xbob"
MALLORY = "0xmallory"


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at 2024-01-15 10:00 UTC until advanced."""
    return FakeClock(datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def seal_key() -> bytes:
    """Generate a test sealing key."""
    return secrets.token_bytes(32)


@pytest.fixture
def sealing(seal_key: bytes) -> Any:
    """SealingService with a test key."""
    from marketpulse.core.sealing import SealingService

    return SealingService(seal_key=seal_key, self_principal="0xledger")


@pytest.fixture
def platform(sealing: Any, clock: FakeClock) -> Any:
    """SurveyPlatform owned by OWNER with a fixed clock."""
    from marketpulse.services.platform import SurveyPlatform

    return SurveyPlatform(owner=OWNER, sealing=sealing, clock=clock)


@pytest.fixture
def survey_id(platform: Any) -> int:
    """A two-response, one-hour survey created by CREATOR."""
    return platform.create_survey(CREATOR, "Product Feedback", 3600, 2)


@pytest.fixture
def sample_answers() -> dict[str, int]:
    """Valid answers for every field."""
    return {
        "age": 3,
        "gender": 1,
        "income": 2,
        "rating": 9,
        "purchase_intent": 4,
        "brand_awareness": 5,
    }
