"""
Error taxonomy for the interview backend.

Every error carries a ``message`` that is safe to show to the user. Provider
exceptions are chained as ``__cause__`` and logged, never surfaced directly.
"""
from typing import List


class VerqError(Exception):
    """Base class for all interview backend errors."""

    default_message = "Something went wrong while processing the interview."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(VerqError):
    """Referenced interview or owner does not exist."""
    default_message = "The requested resource was not found."


class ValidationError(VerqError):
    """Caller supplied an unusable input."""
    default_message = "The request is missing required information."


class InvalidStateError(VerqError):
    """Operation is not allowed in the interview's current status."""
    default_message = "This interview can no longer be changed."


class ConcurrentModificationError(VerqError):
    """Another request changed the interview while this one was running."""
    default_message = (
        "This interview was updated by another request. "
        "Reload the interview and try again."
    )


class UpstreamServiceError(VerqError):
    """An AI capability (LLM, speech, document parsing) failed."""
    default_message = "An AI service is temporarily unavailable. Please try again."


class LLMAuthenticationError(UpstreamServiceError):
    default_message = (
        "The language model rejected our credentials. "
        "Check that GROQ_API_KEY is set correctly."
    )


class LLMQuotaExceededError(UpstreamServiceError):
    default_message = (
        "The language model quota has been exceeded. "
        "Check the provider console for quota limits."
    )


class LLMRateLimitError(UpstreamServiceError):
    default_message = (
        "The language model is receiving too many requests. "
        "Wait a moment and try again."
    )


class UpstreamConnectionError(UpstreamServiceError):
    default_message = (
        "Could not reach the AI service. Check the network connection and try again."
    )


class TranscriptionError(UpstreamServiceError):
    default_message = "Failed to transcribe the recorded answer. Please record it again."


class ResumeExtractionError(UpstreamServiceError):
    default_message = (
        "Failed to read text from the resume. Upload a text-based PDF file."
    )


class MalformedEvaluationError(VerqError):
    """Overall evaluation text did not follow the required template."""

    def __init__(self, violations: List[str]):
        self.violations = list(violations)
        super().__init__(
            "Generated evaluation did not meet the required format: "
            + "; ".join(self.violations)
        )
