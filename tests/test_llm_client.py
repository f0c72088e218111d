import unittest
from unittest.mock import MagicMock

import requests

from config import Settings
from llm_client import LLMClient, strip_code_fences


class TestStripCodeFences(unittest.TestCase):

    def test_json_fence(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_bare_fence(self):
        self.assertEqual(strip_code_fences('```\n{"a": 1}\n```'), '{"a": 1}')

    def test_single_line_fence(self):
        self.assertEqual(strip_code_fences('```{"a": 1}```'), '{"a": 1}')

    def test_no_fence(self):
        self.assertEqual(strip_code_fences('  {"a": 1}\n'), '{"a": 1}')


class TestLLMClient(unittest.TestCase):

    def setUp(self):
        self.settings = Settings(
            openrouter_api_key="test-key",
            openrouter_base_url="https://llm.example.com/api/v1/",
            score_model="test-model",
        )
        self.session = MagicMock()
        self.response = self.session.post.return_value
        self.client = LLMClient(self.settings, session=self.session)

    def test_generate_text_sends_single_user_message(self):
        self.response.json.return_value = {"choices": [{"message": {"content": "hello"}}]}

        self.assertEqual(self.client.generate_text("rate this"), "hello")

        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "https://llm.example.com/api/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer test-key")
        self.assertEqual(kwargs["json"]["model"], "test-model")
        self.assertEqual(kwargs["json"]["messages"], [{"role": "user", "content": "rate this"}])
        self.assertNotIn("stream", kwargs["json"])

    def test_generate_text_without_content(self):
        for body in ({}, {"choices": []}, {"choices": [{"message": {"content": None}}]}):
            with self.subTest(body=body):
                self.response.json.return_value = body
                self.assertIsNone(self.client.generate_text("rate this"))

    def test_http_error_propagates(self):
        error_response = MagicMock(status_code=401, text="unauthorized")
        self.response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            response=error_response
        )

        with self.assertRaises(requests.exceptions.HTTPError):
            self.client.generate_text("rate this")


if __name__ == '__main__':
    unittest.main()
