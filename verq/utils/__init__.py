"""
Utility modules for configuration, logging and text processing.
"""
from .config import Settings, load_settings, INTERVIEW_ROUNDS
from .logger import set_log_level, setup_logger
from .text_utils import prepare_resume_text, normalize_transcript, strip_markdown_emphasis

__all__ = [
    'Settings',
    'load_settings',
    'INTERVIEW_ROUNDS',
    'setup_logger',
    'set_log_level',
    'prepare_resume_text',
    'normalize_transcript',
    'strip_markdown_emphasis'
]
