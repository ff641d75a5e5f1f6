"""
PDF parsing utilities for extracting text from uploaded resumes.
"""
import io
import warnings

import pdfplumber

from ..errors import ResumeExtractionError
from ..utils.config import MIN_RESUME_LENGTH
from ..utils.logger import setup_logger

logger = setup_logger("pdf_parser")


def extract_text_from_pdf(data: bytes) -> str:
    """
    Extract text from PDF content.

    Args:
        data: PDF file content

    Returns:
        Extracted text as string

    Raises:
        ResumeExtractionError: If the content is not a readable PDF
    """
    if not data:
        raise ResumeExtractionError("The uploaded resume is empty.")

    text = ""
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for page in pdf.pages:
                    page_text = page.extract_text()
                    if page_text:
                        text += page_text + "\n"
    except Exception as e:
        logger.error(f"Error extracting text from PDF: {e}")
        raise ResumeExtractionError() from e

    return text.strip()


class ResumeExtractor:
    """Turns an uploaded resume document into plain text."""

    def __init__(self, min_length: int = MIN_RESUME_LENGTH):
        self.min_length = min_length

    def extract_text(self, data: bytes) -> str:
        text = extract_text_from_pdf(data)
        if len(text) < self.min_length:
            logger.warning(f"Resume text too short ({len(text)} chars), rejecting")
            raise ResumeExtractionError(
                "Could not find enough text in the resume. "
                "Scanned documents are not supported; upload a text-based PDF."
            )
        logger.info(f"Extracted {len(text)} characters of resume text")
        return text
