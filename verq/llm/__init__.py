"""
LLM service modules for Groq Cloud integration.
"""
from .groq_service import initialize_llm, translate_llm_error

__all__ = ['initialize_llm', 'translate_llm_error']
