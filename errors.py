"""
Error types raised while scoring a subject.

Each error carries the HTTP status and a stable ``kind`` tag so the web layer
can answer without inspecting message text.
"""

from typing import Optional


class ScoreError(Exception):
    """Base class for every failure the score endpoint reports."""

    kind: str = "uncategorized"
    status_code: int = 500
    default_message: str = "Failed to get ethical score."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class MissingCredential(ScoreError):
    """The provider API key is not configured."""

    kind = "missing_credential"
    status_code = 500
    default_message = "Server configuration error: Missing API key."


class InvalidInput(ScoreError):
    """The request did not carry a usable product name."""

    kind = "invalid_input"
    status_code = 400
    default_message = "Product name is required and must be a non-empty string."


class EmptyProviderResponse(ScoreError):
    kind = "empty_provider_response"
    status_code = 502
    default_message = "No content received from AI model."


class MalformedProviderPayload(ScoreError):
    kind = "malformed_provider_payload"
    status_code = 502
    default_message = "AI model returned improperly formatted data."


class UncategorizedFailure(ScoreError):
    pass


INVALID_BODY_MESSAGE = "Invalid request body. Expected JSON with 'productName'."
