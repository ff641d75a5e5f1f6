"""
Configuration settings for the Verq interview backend.

Module constants hold the defaults. ``load_settings`` reads the environment
once at process start and the resulting ``Settings`` object is passed into the
components that need it.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Base paths
BASE_DIR = Path(__file__).parent.parent.parent
STORAGE_DIR = BASE_DIR / "interview_data"

# LLM configuration
GROQ_MODEL_NAME = "llama-3.3-70b-versatile"
GROQ_TEMPERATURE = 0.7
GROQ_TOP_P = 0.9
GROQ_MAX_TOKENS = 1024
GROQ_SEED = 1

# Speech-to-text configuration
WHISPER_MODEL = "base"  # Options: tiny, base, small, medium, large
WHISPER_LANGUAGE = "en"

# Interview settings
INTERVIEW_ROUNDS = 5  # Rounds before the overall evaluation is produced

# Text processing configuration
MIN_RESUME_LENGTH = 50  # Minimum character length for a usable resume
RESUME_HEAD_CHARS = 6000  # Characters to keep from start of resume for LLM
RESUME_TAIL_CHARS = 3000  # Characters to keep from end of resume for LLM

# Upload limits
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB

LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once and handed to components."""
    groq_api_key: Optional[str] = None
    groq_model_name: str = GROQ_MODEL_NAME
    groq_temperature: float = GROQ_TEMPERATURE
    groq_top_p: float = GROQ_TOP_P
    groq_max_tokens: int = GROQ_MAX_TOKENS
    groq_seed: int = GROQ_SEED
    whisper_model: str = WHISPER_MODEL
    whisper_language: str = WHISPER_LANGUAGE
    interview_rounds: int = INTERVIEW_ROUNDS
    storage_dir: Path = STORAGE_DIR
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    log_level: str = LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from. Default: ``os.environ``

    Returns:
        Settings instance
    """
    if environ is None:
        environ = os.environ

    return Settings(
        groq_api_key=environ.get("GROQ_API_KEY") or None,
        groq_model_name=environ.get("GROQ_MODEL_NAME", GROQ_MODEL_NAME),
        groq_temperature=float(environ.get("GROQ_TEMPERATURE", GROQ_TEMPERATURE)),
        groq_max_tokens=int(environ.get("GROQ_MAX_TOKENS", GROQ_MAX_TOKENS)),
        whisper_model=environ.get("WHISPER_MODEL", WHISPER_MODEL),
        storage_dir=Path(environ.get("VERQ_STORAGE_DIR", STORAGE_DIR)),
        max_upload_bytes=int(environ.get("VERQ_MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES)),
        log_level=environ.get("VERQ_LOG_LEVEL", LOG_LEVEL),
    )
