import os

import pytest

from verq.errors import TranscriptionError
from verq.utils.config import Settings
from verq.utils.text_utils import normalize_transcript
from verq.voice import STTService
from verq.voice.stt_service import FILLER_PROMPT


class FakeWhisperModel:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def transcribe(self, path, **options):
        with open(path, 'rb') as f:
            audio = f.read()
        self.calls.append((path, audio, options))
        if self.error is not None:
            raise self.error
        return {"text": self.text}


def test_transcribe_normalises_whisper_output():
    model = FakeWhisperModel(" So , um  I used a real - time queue .")
    transcript = STTService(model=model).transcribe(b"audio-bytes")

    assert transcript == "So, um I used a real-time queue."
    path, audio, options = model.calls[0]
    assert audio == b"audio-bytes"
    assert not os.path.exists(path)


def test_default_options_keep_filler_words():
    model = FakeWhisperModel("Hello.")
    STTService(Settings(whisper_language="en"), model=model).transcribe(b"x")

    options = model.calls[0][2]
    assert options["initial_prompt"] == FILLER_PROMPT
    assert options["language"] == "en"
    assert options["condition_on_previous_text"] is False


def test_options_override_defaults():
    model = FakeWhisperModel("Hallo.")
    STTService(model=model).transcribe(b"x", options={"language": "de"})

    assert model.calls[0][2]["language"] == "de"


def test_empty_audio_is_rejected():
    model = FakeWhisperModel("unused")

    with pytest.raises(TranscriptionError):
        STTService(model=model).transcribe(b"")
    assert model.calls == []


def test_decoder_failure_cleans_up_temp_file():
    model = FakeWhisperModel(error=RuntimeError("ffmpeg not found"))

    with pytest.raises(TranscriptionError) as excinfo:
        STTService(model=model).transcribe(b"x")

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert not os.path.exists(model.calls[0][0])


def test_silence_gives_empty_transcript():
    assert STTService(model=FakeWhisperModel("   ")).transcribe(b"x") == ""


@pytest.mark.parametrize("raw, expected", [
    ("Hello ,world", "Hello, world"),
    ("Yes .  And  then", "Yes. And then"),
    ("event - driven", "event-driven"),
    ("I   uh   think", "I uh think"),
    ("", ""),
])
def test_normalize_transcript(raw, expected):
    assert normalize_transcript(raw) == expected
