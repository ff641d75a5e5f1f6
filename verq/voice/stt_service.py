"""
Speech-to-Text Service for recorded interview answers.

Uses OpenAI Whisper. Transcripts keep filler words and punctuation because
answer fluency is part of what gets evaluated.
"""
import os
import tempfile
from typing import Any, Dict, Optional

from ..errors import TranscriptionError
from ..utils.config import Settings
from ..utils.logger import setup_logger
from ..utils.text_utils import normalize_transcript

logger = setup_logger("stt_service")

# Whisper drops disfluencies unless the prompt shows it that they are wanted
FILLER_PROMPT = "Umm, let me think like, hmm... Okay, here's what I'm, like, thinking. Uh, so, er, yeah."


class STTService:
    """
    Speech-to-Text service for interview answers.

    The Whisper model is loaded on first use. A preloaded model (anything with
    a ``transcribe(path, **options)`` method) can be passed in instead.
    """

    def __init__(self, settings: Optional[Settings] = None, model: Any = None):
        """
        Initialize STT service.

        Args:
            settings: Settings with Whisper model name and language
            model: Optional preloaded Whisper model
        """
        self.settings = settings or Settings()
        self.model = model

    def _load_model(self):
        if self.model is None:
            try:
                import whisper
            except ImportError as e:
                logger.error("Whisper not installed. Install with: pip install openai-whisper")
                raise TranscriptionError(
                    "Speech recognition is not available on this server."
                ) from e

            try:
                self.model = whisper.load_model(self.settings.whisper_model)
                logger.info(f"Whisper model '{self.settings.whisper_model}' loaded successfully")
            except Exception as e:
                logger.error(f"Error loading Whisper model: {e}")
                raise TranscriptionError(
                    "Speech recognition is not available on this server."
                ) from e
        return self.model

    def default_options(self) -> Dict[str, Any]:
        """Decoder options that preserve filler words and punctuation."""
        return {
            "language": self.settings.whisper_language,
            "task": "transcribe",
            "initial_prompt": FILLER_PROMPT,
            "condition_on_previous_text": False,
            "fp16": False
        }

    def transcribe(
        self,
        audio_bytes: bytes,
        options: Optional[Dict[str, Any]] = None,
        suffix: str = ".webm"
    ) -> str:
        """
        Convert a recorded answer to text.

        Args:
            audio_bytes: Raw audio file content
            options: Extra Whisper options, overriding the defaults
            suffix: File extension hint for the decoder

        Returns:
            Normalised transcript. Empty only when the recording is silent.

        Raises:
            TranscriptionError: If the audio is empty or decoding fails
        """
        if not audio_bytes:
            raise TranscriptionError("The recorded answer is empty. Please record it again.")

        model = self._load_model()
        decode_options = self.default_options()
        if options:
            decode_options.update(options)

        fd, audio_path = tempfile.mkstemp(suffix=suffix)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(audio_bytes)
            result = model.transcribe(audio_path, **decode_options)
        except Exception as e:
            logger.error(f"Whisper transcription error: {e}")
            raise TranscriptionError() from e
        finally:
            try:
                os.remove(audio_path)
            except OSError:
                logger.warning(f"Could not remove temporary audio file {audio_path}")

        transcript = normalize_transcript(result.get("text", ""))
        if not transcript:
            logger.info("Transcription returned no speech")
        return transcript
