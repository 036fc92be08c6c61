"""
Categorical answer fields collected by every survey.

Each field is a bounded category code. Bounds are inclusive and are
checked on plaintext before anything is sealed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResponseField:
    """One categorical answer and its valid range."""

    name: str
    low: int
    high: int
    width: int = 8  # Sealed bit width

    def accepts(self, value: int) -> bool:
        return self.low <= value <= self.high


AGE = ResponseField("age", 1, 7)  # Age bracket
GENDER = ResponseField("gender", 1, 4)
INCOME = ResponseField("income", 1, 6)  # Income bracket
RATING = ResponseField("rating", 1, 10)  # Product rating
PURCHASE_INTENT = ResponseField("purchase_intent", 1, 5)
BRAND_AWARENESS = ResponseField("brand_awareness", 1, 5)

# Submission order; range checks run in this order
RESPONSE_FIELDS: tuple[ResponseField, ...] = (
    AGE,
    GENDER,
    INCOME,
    RATING,
    PURCHASE_INTENT,
    BRAND_AWARENESS,
)

FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in RESPONSE_FIELDS)

FIELDS_BY_NAME: dict[str, ResponseField] = {f.name: f for f in RESPONSE_FIELDS}
