from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List


class ProviderAlternative(BaseModel):
    model_config = ConfigDict(strict=True)

    name: str
    reason: str


class ProviderScorePayload(BaseModel):
    """
    Shape the provider must reply with.

    Strict: numbers must be JSON numbers (not strings or booleans), text must
    be JSON strings, and every alternative must be a {name, reason} object.
    Scores are not range-checked here; they are clamped afterwards.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        allow_inf_nan=False,
    )

    labor_score: float
    climate_score: float
    human_rights_score: float
    labor_explanation: str
    climate_explanation: str
    human_rights_explanation: str
    alternatives: List[ProviderAlternative]
