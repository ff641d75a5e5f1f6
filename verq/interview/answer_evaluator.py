"""
Answer Evaluator for the mock interview.

Scores a single transcribed answer on:
- Clarity
- Technical accuracy
- Language & communication
plus three strengths, three areas to improve, three recommendations and an
overall score.
"""

from typing import Optional

from langchain_classic.chains import LLMChain
from langchain_core.language_models import BaseLanguageModel
from langchain_core.prompts import PromptTemplate

from ..llm.groq_service import translate_llm_error
from ..utils.logger import setup_logger
from .models import AnswerEvaluation
from .parsers import AnswerTemplateParser, ResponseParser

logger = setup_logger("answer_evaluator")


class AnswerEvaluator:
    """
    Evaluates interview answers using LLM.

    Parsing is lenient: a dimension the model did not report comes back with
    score 0, and the evaluation is still returned.
    """

    def __init__(self, llm: BaseLanguageModel, parser: Optional[ResponseParser] = None):
        """
        Initialize answer evaluator.

        Args:
            llm: LangChain model used for evaluation
            parser: Response parser. Default: AnswerTemplateParser
        """
        self.llm = llm
        self.parser = parser or AnswerTemplateParser()
        self._evaluation_chain = None

        logger.info("AnswerEvaluator initialized")

    def _get_evaluation_chain(self) -> LLMChain:
        """Get or create answer evaluation chain."""
        if self._evaluation_chain is None:
            prompt = PromptTemplate(
                input_variables=["question", "answer"],
                template=(
                    "As an expert technical interviewer, evaluate the following interview answer.\n"
                    "Provide your evaluation in EXACTLY this format (including the dashes and spacing):\n\n"
                    "Clarity Score (1-10): [X]\n"
                    "- Brief explanation: [Your explanation]\n\n"
                    "Technical Accuracy Score (1-10): [X]\n"
                    "- Brief explanation: [Your explanation]\n\n"
                    "Language & Communication Score (1-10): [X]\n"
                    "- Brief explanation: [Your explanation]\n\n"
                    "Key Strengths:\n- [Point 1]\n- [Point 2]\n- [Point 3]\n\n"
                    "Areas to Improve:\n- [Point 1]\n- [Point 2]\n- [Point 3]\n\n"
                    "Recommendations:\n- [Point 1]\n- [Point 2]\n- [Point 3]\n\n"
                    "Overall Score (1-10): [X]\n\n"
                    "QUESTION BEING EVALUATED:\n\"{question}\"\n\n"
                    "CANDIDATE'S ANSWER (speech transcript, filler words kept):\n\"{answer}\"\n\n"
                    "Remember to:\n"
                    "1. Use numbers 1-10 for all scores\n"
                    "2. Keep explanations concise (1-2 sentences)\n"
                    "3. Provide exactly 3 bullet points for each list\n"
                    "4. Follow the exact format above"
                )
            )
            self._evaluation_chain = LLMChain(
                llm=self.llm,
                prompt=prompt,
                output_key="evaluation"
            )
        return self._evaluation_chain

    def evaluate(self, question: str, answer_transcript: str) -> AnswerEvaluation:
        """
        Evaluate a candidate's answer.

        Args:
            question: Question that was asked
            answer_transcript: Transcribed answer (may be empty for silence)

        Returns:
            AnswerEvaluation. Scores of 0 mark dimensions the model output
            could not provide.

        Raises:
            UpstreamServiceError: If the model call fails
        """
        try:
            result = self._get_evaluation_chain().invoke({
                "question": question,
                "answer": answer_transcript or "(no answer given)"
            })
        except Exception as e:
            logger.error(f"Error evaluating answer: {e}")
            raise translate_llm_error(e, "evaluate answer") from e

        evaluation_text = str(result.get("evaluation", "")).strip()
        evaluation = self.parser.parse(evaluation_text)

        if evaluation.is_degraded:
            logger.warning(
                f"Evaluation has missing scores: clarity={evaluation.clarity.score}, "
                f"technical_accuracy={evaluation.technical_accuracy.score}, "
                f"language={evaluation.language.score}, overall={evaluation.overall_score}"
            )
            logger.warning(f"Raw evaluation text: {evaluation_text}")

        logger.info(f"Evaluated answer, overall score: {evaluation.overall_score}")
        return evaluation
