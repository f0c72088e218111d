from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env into the process environment so per-call Settings() picks it up
load_dotenv()


class Settings(BaseSettings):
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    score_model: str = "google/gemini-2.0-flash-001"

    llm_temperature: float = 0.0
    llm_max_tokens: int = 1024
    llm_top_p: float = 1.0
    llm_frequency_penalty: float = 0.0
    llm_presence_penalty: float = 0.0

    # Where the web view reaches POST /api/score. Empty means "same server
    # that served the page".
    api_base_url: Optional[str] = None

    log_level: str = "INFO"

    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_base_url: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    @property
    def has_credential(self) -> bool:
        return bool(self.openrouter_api_key and self.openrouter_api_key.strip())


def get_settings() -> Settings:
    """
    Build settings from the current environment.

    Called once per request so a credential added or removed at runtime is
    seen by the next call.
    """
    return Settings()
