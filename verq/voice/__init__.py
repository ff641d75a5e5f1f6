"""
Voice services for the interview system.

Speech-to-Text (STT) turns recorded answers into transcripts.
"""

from .stt_service import STTService

__all__ = ['STTService']
