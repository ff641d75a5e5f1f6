"""
Service layer that wires the interview components together.
"""
from typing import Optional

from langchain_core.language_models import BaseLanguageModel

from ..interview import (
    AnswerEvaluator,
    InterviewRepository,
    InterviewSession,
    OverallEvaluator,
    OwnerRepository,
    QuestionGenerator,
)
from ..llm import initialize_llm
from ..pdf import ResumeExtractor
from ..storage import DocumentStore, JSONFileStore
from ..utils.config import Settings, load_settings
from ..utils.logger import set_log_level, setup_logger
from ..voice import STTService

logger = setup_logger("api_service")


def build_session(
    settings: Settings,
    llm: BaseLanguageModel,
    store: Optional[DocumentStore] = None,
    transcriber: Optional[STTService] = None,
    resume_extractor: Optional[ResumeExtractor] = None
) -> InterviewSession:
    """
    Build an InterviewSession from settings and an LLM.

    Args:
        settings: Process settings
        llm: LangChain model shared by generator and evaluators
        store: Document store. Default: JSONFileStore under settings.storage_dir
        transcriber: Speech-to-text service. Default: Whisper STTService
        resume_extractor: Resume extractor. Default: pdfplumber ResumeExtractor

    Returns:
        InterviewSession
    """
    if store is None:
        store = JSONFileStore(settings.storage_dir)

    return InterviewSession(
        interviews=InterviewRepository(store),
        owners=OwnerRepository(store),
        resume_extractor=resume_extractor or ResumeExtractor(),
        question_generator=QuestionGenerator(llm),
        transcriber=transcriber or STTService(settings),
        answer_evaluator=AnswerEvaluator(llm),
        overall_evaluator=OverallEvaluator(llm, expected_rounds=settings.interview_rounds),
        total_rounds=settings.interview_rounds
    )


class InterviewService:
    """
    Holds the process-wide InterviewSession used by the HTTP layer.
    Components are created in ``initialize`` from explicit settings.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        set_log_level(self.settings.log_level)
        self.llm = None
        self.session: Optional[InterviewSession] = None

    def initialize(self) -> bool:
        """
        Initialize the interview service.

        Returns:
            True if initialization successful, False otherwise
        """
        try:
            logger.info("Initializing Interview Service...")
            self.llm = initialize_llm(self.settings)
            self.session = build_session(self.settings, self.llm)
            logger.info("Interview Service initialized successfully")
            return True
        except Exception as e:
            logger.error(f"Failed to initialize service: {e}")
            self.session = None
            return False

    def is_ready(self) -> bool:
        """Check if service is ready to use."""
        return self.session is not None


# Global service instance
_service_instance: Optional[InterviewService] = None


def get_service() -> InterviewService:
    """Get or create the global service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = InterviewService()
    return _service_instance
