import re
import requests
from typing import Optional, Dict, Any, List
from config import Settings
import logging

# Configure logging
logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```[\w-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class LLMClient:
    """
    Client for interacting with LLMs via OpenRouter.

    Built from a Settings value per request; holds no process-wide state.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    @property
    def base_url(self) -> str:
        return self.settings.openrouter_base_url.rstrip("/")

    def call_chat(
        self,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 1024,
        top_p: float = 1.0,
        frequency_penalty: float = 0.0,
        presence_penalty: float = 0.0,
    ) -> Dict[str, Any]:
        """
        Call OpenRouter chat completions API.
        """
        headers = {
            "Authorization": f"Bearer {self.settings.openrouter_api_key}",
            "X-Title": "Ethical Product Scorer",
            "Content-Type": "application/json"
        }

        data = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": top_p,
            "frequency_penalty": frequency_penalty,
            "presence_penalty": presence_penalty
        }

        url = f"{self.base_url}/chat/completions"
        logger.debug("Calling OpenRouter model=%s", model)

        try:
            response = self.session.post(url, headers=headers, json=data)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            logger.error("LLM %s error: %s", e.response.status_code, e.response.text)
            raise

    def generate_text(self, prompt: str, model: Optional[str] = None) -> Optional[str]:
        """
        Send a single-turn prompt and return the reply text.

        Returns None when the reply carries no message content.
        """
        response = self.call_chat(
            model=model or self.settings.score_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
            top_p=self.settings.llm_top_p,
            frequency_penalty=self.settings.llm_frequency_penalty,
            presence_penalty=self.settings.llm_presence_penalty,
        )

        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
        return content if isinstance(content, str) else None


def strip_code_fences(content: str) -> str:
    """
    Remove a Markdown code fence wrapped around the reply, if present.

    Models love adding them, with or without a language tag.
    """
    content = content.strip()
    match = _FENCE_RE.match(content)
    if match:
        return match.group(1).strip()
    return content
