import json
import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from config import Settings
from errors import (
    EmptyProviderResponse,
    InvalidInput,
    MalformedProviderPayload,
    MissingCredential,
    ScoreError,
    UncategorizedFailure,
)
from llm_client import LLMClient, strip_code_fences
from models import (
    SCORE_MAX,
    SCORE_MIN,
    Alternative,
    Category,
    EvaluationResult,
)
from tracing import NoOpLangfuse

from .score_models import ProviderScorePayload

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are an ethical product evaluator. Your task is to assess the ethical standing of a given product or company based on three specific categories:

1. **Labor Ethics (0-10)**: Evaluate employee treatment, including wages, workplace safety, working conditions, and labor rights. Consider issues like child labor, forced labor, or poor working conditions.

2. **Climate Ethics (0-10)**: Assess the company's environmental impact, including carbon footprint, sustainable sourcing, packaging, and whether the company invests in fossil fuels or contributes to climate change.

3. **Human Rights Ethics (0-10)**: Evaluate whether the company invests in or contributes to human rights violations, such as supporting oppressive regimes, contributing to conflicts, or engaging in practices that harm communities.

For each category, provide a score from 0 (very unethical) to 10 (very ethical), and a 2-3 sentence explanation specific to that category.

Also suggest exactly 3 more ethical alternative products or companies, each with a one-sentence reason.

Respond ONLY with a valid JSON object matching this schema:

{
  "laborScore": 0-10,
  "climateScore": 0-10,
  "humanRightsScore": 0-10,
  "laborExplanation": "2-3 sentences about labor practices.",
  "climateExplanation": "2-3 sentences about environmental impact.",
  "humanRightsExplanation": "2-3 sentences about human rights.",
  "alternatives": [
    {"name": "Alternative name", "reason": "Why it is a more ethical choice."}
  ]
}

Scores must be numbers. Explanations and reasons must be strings.

Do not include any text before or after the JSON object.
"""


def build_score_prompt(subject: str) -> str:
    """
    Construct the single combined instruction sent to the provider.

    The subject is embedded verbatim.
    """
    user_prompt = f'Evaluate the following product/company: "{subject}"'
    return SYSTEM_PROMPT + "\n\n" + user_prompt


def clamp_score(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    return min(high, max(low, float(value)))


def parse_provider_payload(content: Optional[str]) -> ProviderScorePayload:
    """
    Turn the provider's raw reply into a validated payload.

    Raises EmptyProviderResponse when there is no text to parse and
    MalformedProviderPayload when the text is not JSON of the expected shape.
    """
    if content is None or not content.strip():
        raise EmptyProviderResponse()

    clean_content = strip_code_fences(content)
    if not clean_content:
        raise EmptyProviderResponse()

    try:
        data = json.loads(clean_content)
        return ProviderScorePayload.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error("Failed to parse JSON response from AI: %s", e)
        logger.error("Raw AI response content: %s", content)
        raise MalformedProviderPayload() from e


def normalize_payload(subject: str, payload: ProviderScorePayload) -> EvaluationResult:
    """
    Clamp scores and echo the subject back; text and alternatives pass through unchanged.
    """
    return EvaluationResult(
        product_name=subject,
        labor_score=clamp_score(payload.labor_score),
        climate_score=clamp_score(payload.climate_score),
        human_rights_score=clamp_score(payload.human_rights_score),
        labor_explanation=payload.labor_explanation,
        climate_explanation=payload.climate_explanation,
        human_rights_explanation=payload.human_rights_explanation,
        alternatives=[
            Alternative(name=alt.name, reason=alt.reason) for alt in payload.alternatives
        ],
    )


def validate_subject(subject: Any) -> str:
    if not isinstance(subject, str) or not subject.strip():
        raise InvalidInput()
    return subject


def score_subject(
    subject: Any,
    settings: Settings,
    client: LLMClient,
    tracer=None,
) -> EvaluationResult:
    """
    Ask the provider to rate a product or company and return the normalized result.

    Checks the credential and the subject before any provider call. Every
    failure surfaces as a ScoreError subclass.
    """
    if not settings.has_credential:
        logger.error("OpenRouter API key not found.")
        raise MissingCredential()

    subject = validate_subject(subject)
    tracer = tracer or NoOpLangfuse()

    span = tracer.start_observation(
        name="ethical_score",
        as_type="span",
        input={"product_name": subject, "model_name": settings.score_model},
    )

    try:
        logger.info("Sending request to %s for: %s", settings.score_model, subject)
        content = client.generate_text(build_score_prompt(subject))
        result = normalize_payload(subject, parse_provider_payload(content))
    except ScoreError as e:
        logger.error('Error processing score for "%s": %s', subject, e.message)
        span.update(output={"error": e.message, "kind": e.kind})
        span.end()
        raise
    except requests.exceptions.RequestException as e:
        logger.error('Provider call failed for "%s": %s', subject, e)
        span.update(output={"error": str(e), "kind": UncategorizedFailure.kind})
        span.end()
        raise UncategorizedFailure() from e
    except Exception as e:
        logger.exception('Unexpected error processing score for "%s"', subject)
        span.update(output={"error": str(e), "kind": UncategorizedFailure.kind})
        span.end()
        raise UncategorizedFailure() from e

    span.update(output=result.to_wire())
    for category in Category:
        span.score(
            name=f"{category.value}_score",
            value=result.score_for(category),
            data_type="NUMERIC",
            comment=result.explanation_for(category),
        )
    span.score(
        name="overall_score",
        value=result.mean_score(),
        data_type="NUMERIC",
        comment="Mean of the category scores",
    )
    span.end()

    logger.info("Successfully processed score for: %s", subject)
    return result
