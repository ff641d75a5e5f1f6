import httpx
import pytest
from pydantic import ConfigDict, Field
from langchain_core.language_models.fake import FakeListLLM
from langchain_core.language_models.llms import LLM

from verq.errors import ResumeExtractionError, TranscriptionError
from verq.interview import (
    AnswerEvaluator,
    InterviewRepository,
    InterviewSession,
    OverallEvaluator,
    OwnerRepository,
    QuestionGenerator,
)
from verq.storage import InMemoryStore

RESUME_TEXT = (
    "Jane Smith - Backend Engineer. 5 years building Python services with FastAPI, "
    "PostgreSQL and Redis. Led migration of a monolith to event-driven microservices "
    "on Kafka. Projects: payment reconciliation pipeline, rate limiter library."
)

ANSWER_EVALUATION_TEXT = """Clarity Score (1-10): 7
- Brief explanation: The answer was mostly well structured.

Technical Accuracy Score (1-10): 8
- Brief explanation: Correct description of idempotent consumers.

Language & Communication Score (1-10): 6
- Brief explanation: Some filler words but understandable.

Key Strengths:
- Clear example from a real project
- Correct use of terminology
- Mentioned trade-offs

Areas to Improve:
- Reduce filler words
- Quantify impact
- Structure the answer up front

Recommendations:
- Practise the STAR format
- Prepare metrics for key projects
- Slow down when explaining designs

Overall Score (1-10): 7"""

OVERALL_EVALUATION_TEXT = """Overall Technical Proficiency (1-10): 8
- Brief explanation: Solid grasp of distributed backend design.

Communication Skills (1-10): 7
- Brief explanation: Clear but occasionally verbose.

Problem-Solving Ability (1-10): 8
- Brief explanation: Reasoned well about failure modes.

Key Strengths:
- Deep Kafka knowledge
- Pragmatic design choices
- Good ownership of past projects

Areas for Growth:
- Concise delivery
- Database internals
- Capacity planning

Final Recommendations:
- Study query planning
- Practise time-boxed answers
- Review SLO design

Hiring Recommendation: HIRE
- Justification: Strong backend fundamentals with room to grow in communication.

Overall Interview Score (1-10): 8"""


def groq_error(error_class, status_code, message="error"):
    """Build a groq SDK status error the way the client raises it."""
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    response = httpx.Response(status_code, request=request)
    return error_class(message, response=response, body=None)


class FailingLLM(LLM):
    """LLM whose every call raises the configured exception."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    error: Exception

    @property
    def _llm_type(self) -> str:
        return "failing"

    def _call(self, prompt, stop=None, run_manager=None, **kwargs):
        raise self.error


class RecordingLLM(FakeListLLM):
    """FakeListLLM that keeps the prompts it received."""
    prompts: list = Field(default_factory=list)

    def _call(self, prompt, stop=None, run_manager=None, **kwargs):
        self.prompts.append(prompt)
        return super()._call(prompt, stop=stop, run_manager=run_manager, **kwargs)


class FakeTranscriber:
    def __init__(self, transcripts=None, error=None):
        self.transcripts = list(transcripts or ["Um, so I would, uh, use an idempotency key."])
        self.error = error
        self.calls = 0

    def transcribe(self, audio_bytes, options=None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if not audio_bytes:
            raise TranscriptionError("The recorded answer is empty. Please record it again.")
        return self.transcripts[(self.calls - 1) % len(self.transcripts)]


class FakeResumeExtractor:
    def __init__(self, text=RESUME_TEXT):
        self.text = text

    def extract_text(self, data):
        if not data:
            raise ResumeExtractionError("The uploaded resume is empty.")
        return self.text


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def make_session(store):
    """Factory for an InterviewSession wired with scripted collaborators."""

    def _make(
        questions=None,
        evaluations=None,
        overall=None,
        transcriber=None,
        question_llm=None,
        overall_llm=None,
        total_rounds=5
    ):
        question_llm = question_llm or RecordingLLM(
            responses=questions or [f"Question {i}?" for i in range(1, 8)],
            prompts=[]
        )
        evaluation_llm = FakeListLLM(responses=evaluations or [ANSWER_EVALUATION_TEXT])
        overall_llm = overall_llm or FakeListLLM(responses=overall or [OVERALL_EVALUATION_TEXT])

        session = InterviewSession(
            interviews=InterviewRepository(store),
            owners=OwnerRepository(store),
            resume_extractor=FakeResumeExtractor(),
            question_generator=QuestionGenerator(question_llm),
            transcriber=transcriber or FakeTranscriber(),
            answer_evaluator=AnswerEvaluator(evaluation_llm),
            overall_evaluator=OverallEvaluator(overall_llm, expected_rounds=total_rounds),
            total_rounds=total_rounds
        )
        session.register_owner("u1", "jane@example.com", "Jane Smith")
        return session

    return _make


@pytest.fixture
def session(make_session):
    return make_session()
