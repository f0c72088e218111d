"""
Tests for the view state, the HTTP client it uses and the display rules.
"""

import unittest
from unittest.mock import AsyncMock, MagicMock

import httpx

from models import Alternative, EvaluationResult
from presentation import (
    EMPTY_INPUT_MESSAGE,
    FALLBACK_ERROR_MESSAGE,
    FAVORABLE,
    NEUTRAL,
    UNFAVORABLE,
    ScoreApiClient,
    ScoreApiError,
    ScoreView,
    overall_score,
    pie_slice_path,
    score_cards,
    score_color,
    sweep_angle,
)


def make_result(**overrides) -> EvaluationResult:
    values = dict(
        product_name="Acme Widgets",
        labor_score=7,
        climate_score=8,
        human_rights_score=6,
        labor_explanation="Fair wages.",
        climate_explanation="Low emissions.",
        human_rights_explanation="No known issues.",
        alternatives=[Alternative(name="Better Co", reason="fairer")],
    )
    values.update(overrides)
    return EvaluationResult(**values)


class TestScoreApiClient(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.response = MagicMock()
        self.session = MagicMock(spec=httpx.AsyncClient)
        self.session.post = AsyncMock(return_value=self.response)
        self.session.aclose = AsyncMock()
        self.api = ScoreApiClient("http://testserver/", session=self.session)

    async def test_success(self):
        self.response.status_code = 200
        self.response.json.return_value = make_result().to_wire()

        result = await self.api.fetch_score("Acme Widgets")

        self.assertEqual(result, make_result())
        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "http://testserver/api/score")
        self.assertEqual(kwargs["json"], {"productName": "Acme Widgets"})
        self.assertNotIn("timeout", kwargs)

    async def test_server_error_message_is_forwarded(self):
        self.response.status_code = 502
        self.response.json.return_value = {"error": "No content received from AI model."}

        with self.assertRaises(ScoreApiError) as ctx:
            await self.api.fetch_score("Acme")

        self.assertEqual(ctx.exception.message, "No content received from AI model.")
        self.assertEqual(ctx.exception.status_code, 502)

    async def test_error_without_json_body(self):
        self.response.status_code = 500
        self.response.json.side_effect = ValueError("no json")

        with self.assertRaises(ScoreApiError) as ctx:
            await self.api.fetch_score("Acme")

        self.assertEqual(ctx.exception.message, FALLBACK_ERROR_MESSAGE)

    async def test_transport_failure(self):
        self.session.post.side_effect = httpx.ConnectError("refused")

        with self.assertRaises(ScoreApiError) as ctx:
            await self.api.fetch_score("Acme")

        self.assertIn("refused", ctx.exception.message)

    async def test_aclose_closes_session(self):
        await self.api.aclose()

        self.session.aclose.assert_awaited_once()

    async def test_default_session_has_no_timeout(self):
        api = ScoreApiClient("http://testserver")

        self.assertIsNone(api.session.timeout.read)
        await api.aclose()
        self.assertTrue(api.session.is_closed)


class TestScoreView(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.api = MagicMock(spec=ScoreApiClient)
        self.api.fetch_score = AsyncMock()

    async def test_blank_input_never_calls_api(self):
        for text in ("", "   ", "\t\n"):
            with self.subTest(text=text):
                view = ScoreView(product_input=text)
                self.assertFalse(await view.submit(self.api))
                self.assertEqual(view.error, EMPTY_INPUT_MESSAGE)
                self.assertFalse(view.is_loading)
        self.api.fetch_score.assert_not_called()

    async def test_in_flight_blocks_resubmission(self):
        view = ScoreView(product_input="Acme", is_loading=True)

        self.assertFalse(await view.submit(self.api))
        self.api.fetch_score.assert_not_called()

    async def test_loading_during_call_and_cleared_after(self):
        view = ScoreView(product_input="Acme")
        seen = []

        async def fetch(name):
            seen.append(view.is_loading)
            return make_result(product_name=name)

        self.api.fetch_score.side_effect = fetch

        self.assertTrue(await view.submit(self.api))
        self.assertEqual(seen, [True])
        self.assertFalse(view.is_loading)
        self.assertEqual(view.result.product_name, "Acme")
        self.assertIsNone(view.error)

    async def test_prior_state_cleared_on_new_submission(self):
        view = ScoreView(product_input="Acme", result=make_result(), error="old error")
        self.api.fetch_score.side_effect = ScoreApiError("AI model returned improperly formatted data.")

        await view.submit(self.api)

        self.assertIsNone(view.result)
        self.assertEqual(view.error, "AI model returned improperly formatted data.")
        self.assertFalse(view.is_loading)

    async def test_success_clears_prior_error(self):
        view = ScoreView(product_input="Acme", error="old error")
        self.api.fetch_score.return_value = make_result()

        await view.submit(self.api)

        self.assertIsNone(view.error)
        self.assertEqual(view.result, make_result())

    async def test_unexpected_error_still_clears_loading(self):
        view = ScoreView(product_input="Acme")
        self.api.fetch_score.side_effect = RuntimeError("kaboom")

        await view.submit(self.api)

        self.assertFalse(view.is_loading)
        self.assertEqual(view.error, "kaboom")


class TestDisplayRules(unittest.TestCase):

    def test_score_color(self):
        self.assertEqual(score_color(7), FAVORABLE)
        self.assertEqual(score_color(3), UNFAVORABLE)
        self.assertEqual(score_color(5), NEUTRAL)

    def test_score_color_uses_scheme_midpoint(self):
        self.assertEqual(score_color(50, max_score=100), NEUTRAL)
        self.assertEqual(score_color(7, max_score=100), UNFAVORABLE)

    def test_sweep_angle(self):
        self.assertEqual(sweep_angle(0), 0)
        self.assertEqual(sweep_angle(2.5), 90)
        self.assertEqual(sweep_angle(5), 180)
        self.assertEqual(sweep_angle(10), 360)
        self.assertEqual(sweep_angle(25, max_score=100), 90)

    def test_pie_slice_path(self):
        self.assertEqual(pie_slice_path(90), "M 50 50 L 50 0 A 50 50 0 0 1 100.000 50.000 Z")
        self.assertIn("A 50 50 0 1 1", pie_slice_path(270))

    def test_overall_score_is_mean(self):
        self.assertAlmostEqual(overall_score(make_result()), 7.0)

    def test_score_cards(self):
        cards = score_cards(make_result())

        self.assertEqual([c.key for c in cards], ["overall", "labor", "climate", "humanRights"])
        self.assertTrue(cards[0].is_overall)
        self.assertEqual(
            cards[0].explanation,
            "Average of Labor (7), Climate (8), and Human Rights (6) scores.",
        )
        self.assertEqual(cards[1].explanation, "Fair wages.")
        self.assertEqual(len({c.toggle_id for c in cards}), len(cards))

    def test_card_slice_edges(self):
        cards = score_cards(make_result(labor_score=0, climate_score=10))
        labor, climate = cards[1], cards[2]

        self.assertIsNone(labor.slice_path)
        self.assertFalse(labor.is_full)
        self.assertIsNone(climate.slice_path)
        self.assertTrue(climate.is_full)
        self.assertEqual(climate.display_score, "10.0")


if __name__ == '__main__':
    unittest.main()
