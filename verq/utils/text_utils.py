"""
Text helpers for preparing prompts and cleaning transcripts.
"""
import re

from .config import RESUME_HEAD_CHARS, RESUME_TAIL_CHARS

FILLER_WORDS = ("uh", "um", "ah", "er", "hm", "hmm", "uhm")

_FILLER_PATTERN = re.compile(
    r"\s+(" + "|".join(FILLER_WORDS) + r")\s+", re.IGNORECASE
)


def prepare_resume_text(
    text: str,
    head_chars: int = RESUME_HEAD_CHARS,
    tail_chars: int = RESUME_TAIL_CHARS
) -> str:
    """
    Prepare resume text for LLM processing by keeping head and tail.

    Args:
        text: Full resume text
        head_chars: Number of characters to keep from start
        tail_chars: Number of characters to keep from end

    Returns:
        Prepared resume text
    """
    if not text:
        return ""

    text = re.sub(r'\s+', ' ', text).strip()
    if len(text) <= head_chars + tail_chars:
        return text
    return text[:head_chars] + "\n...\n" + text[-tail_chars:]


def normalize_transcript(text: str) -> str:
    """
    Tidy whitespace in a raw speech transcript.

    Fixes spacing around punctuation, dashes and filler words without
    removing any words, so disfluencies stay visible to the evaluator.

    Args:
        text: Raw transcript

    Returns:
        Normalised transcript
    """
    if not text:
        return ""

    text = re.sub(r'\s+([.,!?])', r'\1', text)  # no space before punctuation
    text = re.sub(r'([.,!?])\s+', r'\1 ', text)  # single space after punctuation
    text = re.sub(r'\s*-\s*', '-', text)
    text = re.sub(r'\s*,\s*', ', ', text)
    text = _FILLER_PATTERN.sub(r' \1 ', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def strip_markdown_emphasis(text: str) -> str:
    """Remove bold/underline markers models like to wrap labels in."""
    return re.sub(r'(\*\*|__)', '', text or "")
