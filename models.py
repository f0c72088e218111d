from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List
from enum import Enum

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class Category(str, Enum):
    """Fixed axes of ethical assessment, in display order."""
    LABOR = "labor"
    CLIMATE = "climate"
    HUMAN_RIGHTS = "humanRights"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    Category.LABOR: "Labor Ethics",
    Category.CLIMATE: "Climate Ethics",
    Category.HUMAN_RIGHTS: "Human Rights Ethics",
}


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreRequest(CamelModel):
    """
    Body of POST /api/score.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)

    product_name: str


class Alternative(CamelModel):
    """A suggested, more ethical alternative to the subject."""
    name: str
    reason: str


class EvaluationResult(CamelModel):
    """
    Normalized score for one subject.

    Built fresh for every request; scores are already clamped to
    [SCORE_MIN, SCORE_MAX].
    """
    product_name: str
    labor_score: float = Field(ge=SCORE_MIN, le=SCORE_MAX)
    climate_score: float = Field(ge=SCORE_MIN, le=SCORE_MAX)
    human_rights_score: float = Field(ge=SCORE_MIN, le=SCORE_MAX)
    labor_explanation: str
    climate_explanation: str
    human_rights_explanation: str
    alternatives: List[Alternative] = []

    def score_for(self, category: Category) -> float:
        return {
            Category.LABOR: self.labor_score,
            Category.CLIMATE: self.climate_score,
            Category.HUMAN_RIGHTS: self.human_rights_score,
        }[category]

    def explanation_for(self, category: Category) -> str:
        return {
            Category.LABOR: self.labor_explanation,
            Category.CLIMATE: self.climate_explanation,
            Category.HUMAN_RIGHTS: self.human_rights_explanation,
        }[category]

    def mean_score(self) -> float:
        return sum(self.score_for(c) for c in Category) / len(Category)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class ErrorResponse(BaseModel):
    error: str
    kind: str
