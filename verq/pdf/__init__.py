"""
PDF parsing utilities for extracting text from uploaded resumes.
"""
from .parser import ResumeExtractor, extract_text_from_pdf

__all__ = ['ResumeExtractor', 'extract_text_from_pdf']
