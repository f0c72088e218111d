"""
Presentation layer for the ethical score page.

Holds the view state for one form, the HTTP client the view uses to reach
POST /api/score, and the rules that turn scores into pie slices and colours.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

import httpx

from models import SCORE_MAX, Category, EvaluationResult

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter a product or company name."
FALLBACK_ERROR_MESSAGE = "Failed to fetch score"

FAVORABLE = "score-favorable"
UNFAVORABLE = "score-unfavorable"
NEUTRAL = "score-neutral"


class ScoreApiError(Exception):
    """The score API answered with an error, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ScoreApiClient:
    """
    Calls POST /api/score over HTTP.

    No timeout and no retry: one request per submission, awaited to completion.
    Async: the page route must not hold a worker thread while it waits on its own API.
    """

    def __init__(self, base_url: str, session: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or httpx.AsyncClient(timeout=None)

    async def aclose(self) -> None:
        await self.session.aclose()

    async def fetch_score(self, product_name: str) -> EvaluationResult:
        url = f"{self.base_url}/api/score"
        logger.info("Fetching score for: %s", product_name)
        try:
            response = await self.session.post(url, json={"productName": product_name})
        except httpx.HTTPError as e:
            raise ScoreApiError(str(e)) from e

        if not 200 <= response.status_code < 300:
            raise ScoreApiError(_error_message(response), response.status_code)

        return EvaluationResult.model_validate(response.json())


def _error_message(response) -> str:
    try:
        data = response.json()
    except ValueError:
        return FALLBACK_ERROR_MESSAGE
    if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
        return data["error"]
    return FALLBACK_ERROR_MESSAGE


@dataclass
class ScoreView:
    """
    Transient view state for one form: input, in-flight flag, last result, last error.
    """
    product_input: str = ""
    is_loading: bool = False
    result: Optional[EvaluationResult] = None
    error: Optional[str] = None

    async def submit(self, api: ScoreApiClient) -> bool:
        """
        Run one request/response cycle.

        Returns False when nothing was sent (blank input or a request already
        in flight).
        """
        if self.is_loading:
            return False

        if not self.product_input.strip():
            self.error = EMPTY_INPUT_MESSAGE
            return False

        self.result = None
        self.error = None
        self.is_loading = True
        try:
            self.result = await api.fetch_score(self.product_input)
        except ScoreApiError as e:
            logger.error("Error fetching score: %s", e.message)
            self.error = e.message
        except Exception as e:
            logger.exception("Error fetching score")
            self.error = str(e) or "An unknown error occurred."
        finally:
            self.is_loading = False
        return True

    @property
    def cards(self) -> List["ScoreCard"]:
        return score_cards(self.result) if self.result else []


def overall_score(result: EvaluationResult) -> float:
    """Arithmetic mean of the three category scores."""
    return result.mean_score()


def sweep_angle(score: float, max_score: float = SCORE_MAX) -> float:
    """Map a score linearly onto a full-circle sweep, in degrees."""
    if max_score <= 0:
        return 0.0
    return min(360.0, max(0.0, score / max_score * 360.0))


def score_color(score: float, max_score: float = SCORE_MAX) -> str:
    midpoint = max_score / 2
    if score > midpoint:
        return FAVORABLE
    if score < midpoint:
        return UNFAVORABLE
    return NEUTRAL


def pie_slice_path(angle: float) -> str:
    """
    SVG path for a pie slice in a 100x100 viewBox, starting at 12 o'clock and
    sweeping clockwise.
    """
    radians = math.radians(angle - 90)
    x = math.cos(radians) * 50 + 50
    y = math.sin(radians) * 50 + 50
    large_arc = 1 if angle > 180 else 0
    return f"M 50 50 L 50 0 A 50 50 0 {large_arc} 1 {x:.3f} {y:.3f} Z"


@dataclass
class ScoreCard:
    """One flip card: score pie on the front, explanation on the back."""
    key: str
    label: str
    score: float
    explanation: str
    is_overall: bool = False
    max_score: float = SCORE_MAX

    @property
    def toggle_id(self) -> str:
        return f"card-toggle-{self.key}"

    @property
    def angle(self) -> float:
        return sweep_angle(self.score, self.max_score)

    @property
    def color(self) -> str:
        return score_color(self.score, self.max_score)

    @property
    def is_full(self) -> bool:
        return self.angle >= 360.0

    @property
    def slice_path(self) -> Optional[str]:
        if self.angle <= 0 or self.is_full:
            return None
        return pie_slice_path(self.angle)

    @property
    def display_score(self) -> str:
        return f"{self.score:.1f}"


def score_cards(result: EvaluationResult) -> List[ScoreCard]:
    """
    The overall card first, then one card per category in display order.
    """
    parts = [
        f"{category.label.replace(' Ethics', '')} ({result.score_for(category):g})"
        for category in Category
    ]
    breakdown = ", ".join(parts[:-1]) + ", and " + parts[-1]
    cards = [
        ScoreCard(
            key="overall",
            label="Ethical Score",
            score=overall_score(result),
            explanation=f"Average of {breakdown} scores.",
            is_overall=True,
        )
    ]
    for category in Category:
        cards.append(
            ScoreCard(
                key=category.value,
                label=category.label,
                score=result.score_for(category),
                explanation=result.explanation_for(category),
            )
        )
    return cards
