"""
Tests for survey and response schemas.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from marketpulse.models.documents import SurveyDocument, SurveyStatus
from marketpulse.schemas.response import MarketInsights, ResponseSubmission
from marketpulse.schemas.survey import SurveyCreate, SurveyInfo

NOW = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestSurveyCreate:
    """Tests for survey creation parameters."""

    def test_valid_parameters(self):
        params = SurveyCreate(title="Product Feedback", duration_seconds=3600, max_responses=2)

        assert params.start_time is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": ""},
            {"duration_seconds": 0},
            {"duration_seconds": -5},
            {"max_responses": 0},
            {"max_responses": 2**32},
            {"start_time": datetime(2030, 1, 1)},
        ],
    )
    def test_invalid_parameters(self, overrides):
        data = {"title": "Product Feedback", "duration_seconds": 3600, "max_responses": 2}
        data.update(overrides)

        with pytest.raises(ValidationError):
            SurveyCreate(**data)


@pytest.mark.unit
class TestSurveyInfo:
    """Tests for the public survey view."""

    def test_from_document(self):
        document = SurveyDocument(
            id=1,
            title="Product Feedback",
            start_time=NOW,
            end_time=NOW,
            max_responses=5,
            current_responses=2,
            creator="0xcreator",
            created_at=NOW,
        )

        info = SurveyInfo.model_validate(document)

        assert info.id == 1
        assert info.status == SurveyStatus.ACTIVE
        assert info.current_responses == 2


@pytest.mark.unit
class TestResponseSubmission:
    """Tests for plaintext submissions."""

    def test_answers_in_field_order(self, sample_answers):
        submission = ResponseSubmission(**sample_answers)

        assert list(submission.answers()) == [
            "age",
            "gender",
            "income",
            "rating",
            "purchase_intent",
            "brand_awareness",
        ]
        assert submission.answers()["rating"] == 9

    def test_repr_hides_answers(self, sample_answers):
        submission = ResponseSubmission(**sample_answers)

        assert "9" not in repr(submission)
        assert "9" not in str(submission)

    def test_non_integer_answer_rejected(self, sample_answers):
        sample_answers["age"] = "old"

        with pytest.raises(ValidationError):
            ResponseSubmission(**sample_answers)

    @pytest.mark.parametrize("value", [True, "9", 9.0])
    def test_only_real_integers_accepted(self, sample_answers, value):
        sample_answers["rating"] = value

        with pytest.raises(ValidationError):
            ResponseSubmission(**sample_answers)


@pytest.mark.unit
class TestMarketInsights:
    def test_defaults_are_empty(self):
        insights = MarketInsights(survey_id=1)

        assert insights.total_responses == 0
        assert insights.last_updated is None
        assert insights.insights_generated is False
