"""
Overall Evaluator for a finished mock interview.

Produces the one-shot final verdict: three dimension scores, strengths,
areas for growth, recommendations, a hiring decision and an overall score.
Malformed model output is rejected rather than stored.
"""

from typing import List, Optional

from langchain_classic.chains import LLMChain
from langchain_core.language_models import BaseLanguageModel
from langchain_core.prompts import PromptTemplate

from ..llm.groq_service import translate_llm_error
from ..utils.config import INTERVIEW_ROUNDS
from ..utils.logger import setup_logger
from .models import OverallEvaluation, QuestionRound
from .parsers import OverallTemplateParser, ResponseParser
from .question_generator import summarize_evaluation

logger = setup_logger("overall_evaluator")


def format_rounds(rounds: List[QuestionRound]) -> str:
    """Render rounds as numbered Q/A/E blocks for the prompt."""
    blocks = []
    for index, qa in enumerate(rounds, start=1):
        blocks.append(
            f"Q{index}: {qa.question}\n"
            f"A{index}: {qa.answer or '(no answer given)'}\n"
            f"E{index}:\n{summarize_evaluation(qa.evaluation)}"
        )
    return "\n\n".join(blocks)


class OverallEvaluator:
    """Generates the final evaluation across every round of an interview."""

    def __init__(
        self,
        llm: BaseLanguageModel,
        parser: Optional[ResponseParser] = None,
        expected_rounds: int = INTERVIEW_ROUNDS
    ):
        self.llm = llm
        self.parser = parser or OverallTemplateParser()
        self.expected_rounds = expected_rounds
        self._overall_chain = None

        logger.info("OverallEvaluator initialized")

    def _get_overall_chain(self) -> LLMChain:
        """Get or create overall evaluation chain."""
        if self._overall_chain is None:
            prompt = PromptTemplate(
                input_variables=["job_role", "round_count", "rounds"],
                template=(
                    "You are an expert technical interviewer evaluating a candidate for a {job_role} position.\n"
                    "The candidate has completed {round_count} questions. Here are their responses:\n\n"
                    "{rounds}\n\n"
                    "IMPORTANT: You must follow this EXACT template. Replace the [text] with your evaluation, "
                    "keeping all formatting, spacing, and dashes exactly as shown:\n\n"
                    "Overall Technical Proficiency (1-10): [single number 1-10]\n"
                    "- Brief explanation: [single sentence explanation]\n\n"
                    "Communication Skills (1-10): [single number 1-10]\n"
                    "- Brief explanation: [single sentence explanation]\n\n"
                    "Problem-Solving Ability (1-10): [single number 1-10]\n"
                    "- Brief explanation: [single sentence explanation]\n\n"
                    "Key Strengths:\n- [first strength point]\n- [second strength point]\n- [third strength point]\n\n"
                    "Areas for Growth:\n- [first growth area]\n- [second growth area]\n- [third growth area]\n\n"
                    "Final Recommendations:\n- [first recommendation]\n- [second recommendation]\n"
                    "- [third recommendation]\n\n"
                    "Hiring Recommendation: [EXACTLY one of: STRONG HIRE, HIRE, CONSIDER, DO NOT HIRE]\n"
                    "- Justification: [2-3 sentence justification]\n\n"
                    "Overall Interview Score (1-10): [single number 1-10]\n\n"
                    "CRITICAL RULES:\n"
                    "1. All scores must be single whole numbers between 1 and 10\n"
                    "2. Each bullet point section must have EXACTLY 3 points\n"
                    "3. Hiring recommendation must be EXACTLY one of: STRONG HIRE, HIRE, CONSIDER, DO NOT HIRE\n"
                    "4. Keep all dashes, colons, and spacing exactly as shown\n"
                    "5. Do not add any text outside this template"
                )
            )
            self._overall_chain = LLMChain(
                llm=self.llm,
                prompt=prompt,
                output_key="evaluation"
            )
        return self._overall_chain

    def evaluate_overall(self, rounds: List[QuestionRound], job_role: str) -> OverallEvaluation:
        """
        Evaluate the whole interview.

        Args:
            rounds: Every round of the interview, in order
            job_role: Target role

        Returns:
            Validated OverallEvaluation

        Raises:
            ValueError: If the number of rounds is not the interview length
            UpstreamServiceError: If the model call fails
            MalformedEvaluationError: If the response breaks the template
        """
        if len(rounds) != self.expected_rounds:
            raise ValueError(
                f"Overall evaluation needs {self.expected_rounds} rounds, got {len(rounds)}"
            )

        try:
            result = self._get_overall_chain().invoke({
                "job_role": job_role,
                "round_count": len(rounds),
                "rounds": format_rounds(rounds)
            })
        except Exception as e:
            logger.error(f"Error generating overall evaluation: {e}")
            raise translate_llm_error(e, "generate overall evaluation") from e

        evaluation = self.parser.parse(str(result.get("evaluation", "")).strip())
        logger.info(
            f"Overall evaluation: score={evaluation.overall_score}, "
            f"decision={evaluation.hiring_recommendation.decision}"
        )
        return evaluation
