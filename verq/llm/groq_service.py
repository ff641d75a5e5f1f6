"""
Groq Cloud LLM service for interview question generation and evaluation.

Builds the chat model from explicit settings and translates provider
exceptions into the interview error taxonomy so callers never see raw
provider messages.
"""
from typing import Optional

import groq
from langchain_groq import ChatGroq

from ..errors import (
    LLMAuthenticationError,
    LLMQuotaExceededError,
    LLMRateLimitError,
    UpstreamConnectionError,
    UpstreamServiceError,
)
from ..utils.config import Settings
from ..utils.logger import setup_logger

logger = setup_logger("groq_service")


def initialize_llm(settings: Optional[Settings] = None) -> ChatGroq:
    """
    Initialize Groq Cloud LLM.

    Args:
        settings: Settings with the API key and model parameters.
            If None, uses defaults (the API key is then required from
            ``Settings.groq_api_key`` anyway).

    Returns:
        ChatGroq LLM instance

    Raises:
        ValueError: If no API key is configured
    """
    if settings is None:
        settings = Settings()

    if not settings.groq_api_key:
        raise ValueError("GROQ_API_KEY not found. Please set it in the environment.")

    try:
        llm = ChatGroq(
            groq_api_key=settings.groq_api_key,
            model_name=settings.groq_model_name,
            temperature=settings.groq_temperature,
            max_tokens=settings.groq_max_tokens,
            model_kwargs={
                "top_p": settings.groq_top_p,
                "seed": settings.groq_seed
            }
        )
        logger.info(
            f"Groq Cloud LLM initialized: {settings.groq_model_name} "
            f"(temp={settings.groq_temperature}, max_tokens={settings.groq_max_tokens})"
        )
        return llm
    except Exception as e:
        logger.error(f"Groq initialization failed: {e}")
        raise


def translate_llm_error(error: Exception, action: str) -> UpstreamServiceError:
    """
    Map a provider exception to a user-actionable upstream error.

    Args:
        error: Exception raised while invoking the model
        action: What was being attempted, e.g. "generate interview question"

    Returns:
        UpstreamServiceError subclass instance (caller raises it ``from error``)
    """
    if isinstance(error, UpstreamServiceError):
        return error

    text = str(error).lower()

    if isinstance(error, (groq.AuthenticationError, groq.PermissionDeniedError)):
        return LLMAuthenticationError()
    if isinstance(error, groq.RateLimitError):
        if "quota" in text:
            return LLMQuotaExceededError()
        return LLMRateLimitError()
    if isinstance(error, groq.APIConnectionError):
        return UpstreamConnectionError()

    # Providers wrapped by other LangChain integrations only expose the message
    if "api key" in text or "api_key" in text:
        return LLMAuthenticationError()
    if "quota" in text:
        return LLMQuotaExceededError()
    if "rate limit" in text or "too many requests" in text:
        return LLMRateLimitError()

    return UpstreamServiceError(f"Failed to {action}. Please try again.")
