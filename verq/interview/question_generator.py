"""
Question Generator for the mock interview.

Generates one interview question at a time from:
- Candidate resume (projects, skills, technologies)
- Target job role
- Optionally the previous round, for follow-up questions

Whether a follow-up pivots to a new topic or digs deeper is left to the
model; the prompt tells it how to decide.
"""

from typing import Optional

from langchain_classic.chains import LLMChain
from langchain_core.language_models import BaseLanguageModel
from langchain_core.prompts import PromptTemplate

from ..errors import UpstreamServiceError
from ..llm.groq_service import translate_llm_error
from ..utils.logger import setup_logger
from ..utils.text_utils import prepare_resume_text
from .models import AnswerEvaluation, QuestionRound

logger = setup_logger("question_generator")


def summarize_evaluation(evaluation: AnswerEvaluation) -> str:
    """Compact plain-text view of an answer evaluation for prompts."""
    lines = [
        f"Clarity: {evaluation.clarity.score}/10 - {evaluation.clarity.explanation}",
        f"Technical accuracy: {evaluation.technical_accuracy.score}/10 - "
        f"{evaluation.technical_accuracy.explanation}",
        f"Language & communication: {evaluation.language.score}/10 - "
        f"{evaluation.language.explanation}",
        f"Overall: {evaluation.overall_score}/10",
    ]
    if evaluation.strengths:
        lines.append("Strengths: " + "; ".join(evaluation.strengths))
    if evaluation.areas_for_improvement:
        lines.append("Areas to improve: " + "; ".join(evaluation.areas_for_improvement))
    return "\n".join(lines)


class QuestionGenerator:
    """
    Generates interview questions using LLM.

    Supports:
    - Fresh questions (first question, and each new topic after it)
    - Follow-up questions (based on the previous round)
    """

    def __init__(self, llm: BaseLanguageModel):
        """
        Initialize question generator.

        Args:
            llm: LangChain model used for generation
        """
        self.llm = llm
        self._question_chain = None
        self._followup_chain = None

        logger.info("QuestionGenerator initialized")

    def _get_question_chain(self) -> LLMChain:
        """Get or create fresh question generation chain."""
        if self._question_chain is None:
            prompt = PromptTemplate(
                input_variables=["job_role", "resume_text"],
                template=(
                    "Based on the following resume text and the role the candidate is applying for, "
                    "generate a single technical interview question. It should be brief, around 2-3 lines.\n"
                    "The question should be moderate to high difficulty and should focus on:\n"
                    "1. The projects mentioned in the resume\n"
                    "2. The technical skills listed\n"
                    "3. The technologies used in their projects\n"
                    "4. The specific requirements and responsibilities of the role they're applying for\n\n"
                    "The question should test their deep understanding of the technologies and concepts "
                    "they claim to know, while also assessing their fit for the specific role.\n"
                    "Make the question specific and detailed, requiring them to demonstrate practical knowledge.\n\n"
                    "ROLE:\n{job_role}\n\n"
                    "RESUME TEXT:\n{resume_text}\n\n"
                    "Generate only the question, without any additional explanation or context."
                )
            )
            self._question_chain = LLMChain(
                llm=self.llm,
                prompt=prompt,
                output_key="question"
            )
        return self._question_chain

    def _get_followup_chain(self) -> LLMChain:
        """Get or create follow-up question generation chain."""
        if self._followup_chain is None:
            prompt = PromptTemplate(
                input_variables=["job_role", "resume_text", "previous_question", "answer", "evaluation"],
                template=(
                    "You are interviewing a candidate for a {job_role} position. "
                    "Based on the following information, generate a follow-up question.\n\n"
                    "PREVIOUS QUESTION:\n{previous_question}\n\n"
                    "CANDIDATE'S ANSWER:\n{answer}\n\n"
                    "EVALUATION:\n{evaluation}\n\n"
                    "If the answer was irrelevant or scored low on technical accuracy, generate a new question "
                    "based on the resume that tests their knowledge in a different area.\n"
                    "If the answer was good, generate a deeper follow-up question that builds on their response "
                    "and tests their understanding further.\n\n"
                    "RESUME TEXT:\n{resume_text}\n\n"
                    "Generate only the question, without any additional explanation or context."
                )
            )
            self._followup_chain = LLMChain(
                llm=self.llm,
                prompt=prompt,
                output_key="question"
            )
        return self._followup_chain

    def _run(self, chain: LLMChain, inputs: dict, action: str) -> str:
        try:
            result = chain.invoke(inputs)
        except Exception as e:
            logger.error(f"Error trying to {action}: {e}")
            raise translate_llm_error(e, action) from e

        question = str(result.get("question", "")).strip()
        if not question:
            logger.error(f"Model returned an empty reply while trying to {action}")
            raise UpstreamServiceError(f"Failed to {action}. Please try again.")
        return question

    def generate_question(self, resume_text: str, job_role: str) -> str:
        """
        Generate a fresh question about the resume and role.

        Used for the first question and for each new round; no memory of
        earlier rounds is passed, so topics vary.
        """
        question = self._run(
            self._get_question_chain(),
            {
                "job_role": job_role,
                "resume_text": prepare_resume_text(resume_text)
            },
            "generate interview question"
        )
        logger.info(f"Generated question for role '{job_role}' ({len(question)} chars)")
        return question

    def generate_followup_question(
        self,
        resume_text: str,
        job_role: str,
        previous_round: QuestionRound
    ) -> str:
        """
        Generate a follow-up question from the previous round.

        Args:
            resume_text: Candidate's resume text
            job_role: Target role
            previous_round: Last question, answer and evaluation

        Returns:
            Question text
        """
        question = self._run(
            self._get_followup_chain(),
            {
                "job_role": job_role,
                "resume_text": prepare_resume_text(resume_text),
                "previous_question": previous_round.question,
                "answer": previous_round.answer or "(no answer given)",
                "evaluation": summarize_evaluation(previous_round.evaluation)
            },
            "generate follow-up question"
        )
        logger.info(f"Generated follow-up question ({len(question)} chars)")
        return question

    def generate(
        self,
        resume_text: str,
        job_role: str,
        prior_round: Optional[QuestionRound] = None
    ) -> str:
        """Fresh question without ``prior_round``, follow-up with it."""
        if prior_round is None:
            return self.generate_question(resume_text, job_role)
        return self.generate_followup_question(resume_text, job_role, prior_round)
