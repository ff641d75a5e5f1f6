import logging
from datetime import datetime

import groq
import pytest
from langchain_core.language_models.fake import FakeListLLM

from conftest import (
    ANSWER_EVALUATION_TEXT,
    OVERALL_EVALUATION_TEXT,
    FailingLLM,
    RecordingLLM,
    groq_error,
)
from verq.errors import (
    LLMAuthenticationError,
    LLMRateLimitError,
    MalformedEvaluationError,
    UpstreamServiceError,
)
from verq.interview import AnswerEvaluator, OverallEvaluator
from verq.interview.models import QuestionRound
from verq.interview.overall_evaluator import format_rounds
from verq.interview.parsers import AnswerTemplateParser


def make_rounds(count):
    evaluation = AnswerTemplateParser().parse(ANSWER_EVALUATION_TEXT)
    return [
        QuestionRound(
            question=f"Question {i}?",
            answer=f"Answer {i}",
            evaluation=evaluation,
            timestamp=datetime(2024, 1, 1, 12, i)
        )
        for i in range(1, count + 1)
    ]


class TestAnswerEvaluator:
    def test_evaluate_parses_model_output(self):
        llm = RecordingLLM(responses=[ANSWER_EVALUATION_TEXT], prompts=[])
        evaluation = AnswerEvaluator(llm).evaluate("What is Kafka?", "A distributed log.")

        assert evaluation.clarity.score == 7
        assert evaluation.overall_score == 7
        assert "What is Kafka?" in llm.prompts[0]
        assert "A distributed log." in llm.prompts[0]

    def test_empty_answer_is_still_evaluated(self):
        llm = RecordingLLM(responses=[ANSWER_EVALUATION_TEXT], prompts=[])
        AnswerEvaluator(llm).evaluate("What is Kafka?", "")

        assert "(no answer given)" in llm.prompts[0]

    def test_degraded_evaluation_logs_warning(self, caplog):
        llm = FakeListLLM(responses=["Clarity Score (1-10): 5\n- Brief explanation: Fine."])

        with caplog.at_level(logging.WARNING):
            evaluation = AnswerEvaluator(llm).evaluate("Q?", "A")

        assert evaluation.clarity.score == 5
        assert evaluation.technical_accuracy.score == 0
        assert "missing scores" in caplog.text

    def test_provider_failure_is_translated(self):
        llm = FailingLLM(error=groq_error(groq.RateLimitError, 429, "Rate limit reached"))

        with pytest.raises(LLMRateLimitError) as excinfo:
            AnswerEvaluator(llm).evaluate("Q?", "A")

        assert isinstance(excinfo.value.__cause__, groq.RateLimitError)


class TestOverallEvaluator:
    def test_evaluate_overall(self):
        llm = RecordingLLM(responses=[OVERALL_EVALUATION_TEXT], prompts=[])
        evaluation = OverallEvaluator(llm).evaluate_overall(make_rounds(5), "Backend Engineer")

        assert evaluation.hiring_recommendation.decision == "HIRE"
        assert evaluation.overall_score == 8
        assert "Backend Engineer" in llm.prompts[0]
        assert "Question 5?" in llm.prompts[0]

    @pytest.mark.parametrize("count", [4, 6])
    def test_wrong_round_count(self, count):
        llm = FakeListLLM(responses=[OVERALL_EVALUATION_TEXT])

        with pytest.raises(ValueError):
            OverallEvaluator(llm).evaluate_overall(make_rounds(count), "Backend Engineer")

    def test_malformed_output(self):
        llm = FakeListLLM(responses=[OVERALL_EVALUATION_TEXT.replace("HIRE\n", "MAYBE\n")])

        with pytest.raises(MalformedEvaluationError) as excinfo:
            OverallEvaluator(llm).evaluate_overall(make_rounds(5), "Backend Engineer")

        assert excinfo.value.violations == ["Invalid hiring decision: MAYBE"]

    def test_auth_failure(self):
        llm = FailingLLM(error=groq_error(groq.AuthenticationError, 401, "Invalid API Key"))

        with pytest.raises(LLMAuthenticationError):
            OverallEvaluator(llm).evaluate_overall(make_rounds(5), "Backend Engineer")

    def test_unknown_failure_is_generic(self):
        llm = FailingLLM(error=RuntimeError("boom"))

        with pytest.raises(UpstreamServiceError) as excinfo:
            OverallEvaluator(llm).evaluate_overall(make_rounds(5), "Backend Engineer")

        assert excinfo.value.message == "Failed to generate overall evaluation. Please try again."


def test_format_rounds_numbers_each_round():
    text = format_rounds(make_rounds(2))

    assert "Question 1?" in text
    assert "Answer 2" in text
