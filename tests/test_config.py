import logging
from pathlib import Path

import pytest

from verq.api import InterviewService
from verq.utils.config import INTERVIEW_ROUNDS, LOG_LEVEL, Settings, load_settings
from verq.utils.logger import set_log_level, setup_logger
from verq.utils.text_utils import prepare_resume_text


def test_load_settings_reads_environment():
    settings = load_settings({
        "GROQ_API_KEY": "gsk_test",
        "GROQ_MODEL_NAME": "llama-3.1-8b-instant",
        "GROQ_TEMPERATURE": "0.2",
        "WHISPER_MODEL": "small",
        "VERQ_STORAGE_DIR": "/tmp/verq",
        "VERQ_MAX_UPLOAD_BYTES": "1024",
    })

    assert settings.groq_api_key == "gsk_test"
    assert settings.groq_model_name == "llama-3.1-8b-instant"
    assert settings.groq_temperature == 0.2
    assert settings.whisper_model == "small"
    assert settings.storage_dir == Path("/tmp/verq")
    assert settings.max_upload_bytes == 1024


def test_defaults():
    settings = load_settings({"GROQ_API_KEY": ""})

    assert settings.groq_api_key is None
    assert settings.interview_rounds == INTERVIEW_ROUNDS == 5
    assert settings == Settings()


def test_prepare_resume_text_keeps_head_and_tail():
    text = "a" * 50 + "b" * 50 + "c" * 50

    prepared = prepare_resume_text(text, head_chars=20, tail_chars=10)

    assert prepared == "a" * 20 + "\n...\n" + "c" * 10
    assert prepare_resume_text("  short   resume ") == "short resume"


@pytest.fixture
def restore_log_level():
    yield
    set_log_level(LOG_LEVEL)


def test_service_applies_configured_log_level(restore_log_level, tmp_path):
    logger = setup_logger("session_manager")

    InterviewService(settings=load_settings({
        "VERQ_LOG_LEVEL": "warning",
        "VERQ_STORAGE_DIR": str(tmp_path),
    }))

    assert logger.level == logging.WARNING
    assert all(handler.level == logging.WARNING for handler in logger.handlers)


def test_setup_logger_is_idempotent():
    first = setup_logger("verq_test_logger", log_level="DEBUG")
    second = setup_logger("verq_test_logger", log_level="ERROR")

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG
