import logging
from typing import Any

from langfuse import Langfuse

from config import Settings

logger = logging.getLogger(__name__)


class NoOpSpan:
    """A no-op span that ignores all calls."""
    def start_observation(self, *args, **kwargs) -> 'NoOpSpan':
        return self

    def update(self, *args, **kwargs) -> 'NoOpSpan':
        return self

    def score(self, *args, **kwargs) -> 'NoOpSpan':
        return self

    def end(self, *args, **kwargs) -> 'NoOpSpan':
        return self


class NoOpLangfuse:
    """A no-op Langfuse client that returns no-op spans."""
    def start_observation(self, *args, **kwargs) -> NoOpSpan:
        return NoOpSpan()

    def flush(self, *args, **kwargs) -> None:
        pass


def create_tracer(settings: Settings) -> Any:
    """
    Build a Langfuse client when keys are configured, otherwise a no-op tracer.
    """
    if not (settings.langfuse_public_key and settings.langfuse_secret_key):
        return NoOpLangfuse()

    options = {
        "public_key": settings.langfuse_public_key,
        "secret_key": settings.langfuse_secret_key,
    }
    if settings.langfuse_base_url:
        options["host"] = settings.langfuse_base_url

    try:
        return Langfuse(**options)
    except Exception as e:
        logger.warning("Failed to initialize Langfuse: %s", e)
        return NoOpLangfuse()
