"""
Interview Session state machine.

Drives an interview through:
    pending -> in_progress -> completed | cancelled

Each round transcribes the spoken answer, evaluates it, appends the round,
then either asks the next question or, after the last round, produces the
overall evaluation and completes the interview. Rounds are appended with a
version check so two concurrent submissions cannot both land.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..errors import (
    ConcurrentModificationError,
    InvalidStateError,
    MalformedEvaluationError,
    NotFoundError,
    UpstreamServiceError,
    ValidationError,
)
from ..pdf.parser import ResumeExtractor
from ..utils.config import INTERVIEW_ROUNDS
from ..utils.logger import setup_logger
from ..voice.stt_service import STTService
from .answer_evaluator import AnswerEvaluator
from .models import (
    AnswerEvaluation,
    Interview,
    InterviewStatus,
    OverallEvaluation,
    Owner,
    QuestionRound,
)
from .overall_evaluator import OverallEvaluator
from .question_generator import QuestionGenerator
from .repository import InterviewRepository, OwnerRepository

logger = setup_logger("session_manager")


@dataclass(frozen=True)
class StartResult:
    interview_id: str
    question: str
    status: InterviewStatus


@dataclass(frozen=True)
class SubmitResult:
    is_complete: bool
    evaluation: AnswerEvaluation
    next_question: Optional[str] = None
    overall_evaluation: Optional[OverallEvaluation] = None


class InterviewSession:
    """
    Orchestrates interviews end to end.

    All collaborators are passed in; nothing is looked up globally.
    """

    def __init__(
        self,
        interviews: InterviewRepository,
        owners: OwnerRepository,
        resume_extractor: ResumeExtractor,
        question_generator: QuestionGenerator,
        transcriber: STTService,
        answer_evaluator: AnswerEvaluator,
        overall_evaluator: OverallEvaluator,
        total_rounds: int = INTERVIEW_ROUNDS
    ):
        self.interviews = interviews
        self.owners = owners
        self.resume_extractor = resume_extractor
        self.question_generator = question_generator
        self.transcriber = transcriber
        self.answer_evaluator = answer_evaluator
        self.overall_evaluator = overall_evaluator
        self.total_rounds = total_rounds

        logger.info(f"InterviewSession initialized ({total_rounds} rounds per interview)")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_interview(self, interview_id: str) -> Interview:
        """Get interview by ID."""
        interview = self.interviews.get(interview_id)
        if interview is None:
            raise NotFoundError("Interview not found")
        return interview

    def list_interviews(self, owner_id: str) -> List[Interview]:
        """Owner's interviews, newest first."""
        self._require_owner(owner_id)
        interviews = self.interviews.list_by_owner(owner_id)
        logger.info(f"Found {len(interviews)} interviews for owner {owner_id}")
        return interviews

    def register_owner(self, owner_id: str, email: str = "", display_name: str = "") -> Owner:
        """Create the owner record, or return the existing one."""
        if not owner_id or not owner_id.strip():
            raise ValidationError("Owner id is required")
        existing = self.owners.get(owner_id)
        if existing is not None:
            return existing
        owner = self.owners.create(Owner(id=owner_id, email=email, display_name=display_name))
        logger.info(f"Registered owner {owner_id}")
        return owner

    def _require_owner(self, owner_id: str) -> Owner:
        owner = self.owners.get(owner_id) if owner_id else None
        if owner is None:
            raise NotFoundError("User not found")
        return owner

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, owner_id: str, job_role: str, resume_bytes: bytes) -> StartResult:
        """
        Start a new interview and ask the first question.

        Args:
            owner_id: Opaque owner key
            job_role: Role the candidate is practising for
            resume_bytes: Uploaded resume document

        Returns:
            StartResult with the interview id and first question

        Raises:
            NotFoundError: Unknown owner
            ValidationError: Empty job role
            UpstreamServiceError: Resume extraction or question generation failed
            ConcurrentModificationError: The interview changed, e.g. was cancelled,
                while the first question was generated
        """
        self._require_owner(owner_id)
        job_role = (job_role or "").strip()
        if not job_role:
            raise ValidationError("Resume and job role are required")

        resume_text = self.resume_extractor.extract_text(resume_bytes)

        now = datetime.now()
        interview = self.interviews.create(Interview(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            job_role=job_role,
            resume_text=resume_text,
            status=InterviewStatus.PENDING,
            created_at=now,
            updated_at=now
        ))
        logger.info(f"Created interview {interview.id} for owner {owner_id}, role '{job_role}'")

        try:
            question = self.question_generator.generate_question(resume_text, job_role)
        except UpstreamServiceError:
            self._cancel_after_failure(interview.id)
            raise

        try:
            interview = self._update(
                interview, {"status": InterviewStatus.IN_PROGRESS}, check_version=True
            )
        except ConcurrentModificationError:
            logger.warning(f"Interview {interview.id} changed while its first question was generated")
            raise
        logger.info(f"Interview {interview.id} started")
        return StartResult(interview_id=interview.id, question=question, status=interview.status)

    def submit_answer(
        self,
        interview_id: str,
        current_question: str,
        audio_bytes: bytes,
        expected_rounds: Optional[int] = None
    ) -> SubmitResult:
        """
        Record the answer to the current question and move the interview on.

        Args:
            interview_id: Interview ID
            current_question: Question the audio answers
            audio_bytes: Recorded answer
            expected_rounds: Round count the client believes is stored; a
                mismatch means another submission got in first

        Returns:
            SubmitResult. After the last round ``is_complete`` is True and
            ``overall_evaluation`` is set; otherwise ``next_question`` is set.

        Raises:
            NotFoundError: Unknown interview
            ValidationError: Empty question text
            InvalidStateError: Interview is finished or holds every round
            ConcurrentModificationError: Another submission was stored first
            UpstreamServiceError: Transcription, evaluation or generation failed
            MalformedEvaluationError: Overall evaluation broke the template
        """
        interview = self.get_interview(interview_id)
        current_question = (current_question or "").strip()
        if not current_question:
            raise ValidationError("Audio file and current question are required")
        self._require_open(interview)
        if interview.round_count >= self.total_rounds:
            raise InvalidStateError(
                "All questions have been answered. Finalize the interview to get the overall evaluation."
            )
        if expected_rounds is not None and expected_rounds != interview.round_count:
            logger.warning(
                f"Interview {interview_id}: client expected {expected_rounds} rounds, "
                f"found {interview.round_count}"
            )
            raise ConcurrentModificationError()

        # Nothing is written until both upstream calls succeed
        transcript = self.transcriber.transcribe(audio_bytes)
        logger.info(f"Interview {interview_id}: transcribed answer ({len(transcript)} chars)")
        evaluation = self.answer_evaluator.evaluate(current_question, transcript)

        new_round = QuestionRound(
            question=current_question,
            answer=transcript,
            evaluation=evaluation,
            timestamp=datetime.now()
        )
        interview = self._update(
            interview,
            {"questions": interview.questions + [new_round]},
            check_version=True
        )
        logger.info(
            f"Interview {interview_id}: stored round {interview.round_count}/{self.total_rounds}"
        )

        if interview.round_count >= self.total_rounds:
            overall = self._complete(interview)
            return SubmitResult(is_complete=True, evaluation=evaluation, overall_evaluation=overall)

        try:
            next_question = self.question_generator.generate_question(
                interview.resume_text, interview.job_role
            )
        except UpstreamServiceError:
            self._cancel_after_failure(interview_id)
            raise

        return SubmitResult(is_complete=False, evaluation=evaluation, next_question=next_question)

    def generate_follow_up(self, interview_id: str) -> str:
        """
        Ask a question that builds on the latest round.

        With no rounds yet this is a fresh question. Does not change the
        interview; the question is stored with its answer.
        """
        interview = self.get_interview(interview_id)
        self._require_open(interview)

        last_round = interview.last_round
        if last_round is None:
            return self.question_generator.generate_question(
                interview.resume_text, interview.job_role
            )
        return self.question_generator.generate_followup_question(
            interview.resume_text, interview.job_role, last_round
        )

    def finalize(self, interview_id: str) -> OverallEvaluation:
        """
        Produce the overall evaluation for an interview holding every round.

        Used to retry after a malformed overall evaluation. A completed
        interview returns its stored evaluation.
        """
        interview = self.get_interview(interview_id)
        if interview.status == InterviewStatus.COMPLETED:
            return interview.overall_evaluation
        self._require_open(interview)
        if interview.round_count < self.total_rounds:
            raise InvalidStateError(
                f"Interview has {interview.round_count} of {self.total_rounds} answers; "
                "answer every question first."
            )
        return self._complete(interview)

    def cancel(self, interview_id: str) -> Interview:
        """Cancel an interview. Cancelling twice is a no-op."""
        while True:
            interview = self.get_interview(interview_id)
            if interview.status == InterviewStatus.CANCELLED:
                return interview
            if interview.status == InterviewStatus.COMPLETED:
                raise InvalidStateError("A completed interview cannot be cancelled.")

            try:
                interview = self._update(
                    interview, {"status": InterviewStatus.CANCELLED}, check_version=True
                )
                break
            except ConcurrentModificationError:
                # Status may have moved on; check it again
                continue
        logger.info(f"Interview {interview_id} cancelled")
        return interview

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_open(self, interview: Interview):
        if interview.status.is_terminal:
            raise InvalidStateError(f"This interview is already {interview.status.value}.")

    def _complete(self, interview: Interview) -> OverallEvaluation:
        try:
            overall = self.overall_evaluator.evaluate_overall(
                interview.questions[:self.total_rounds], interview.job_role
            )
        except MalformedEvaluationError:
            # Interview stays in progress; finalize() can retry
            logger.error(f"Interview {interview.id}: overall evaluation rejected, left in progress")
            raise
        except UpstreamServiceError:
            self._cancel_after_failure(interview.id)
            raise

        now = datetime.now()
        self._update(
            interview,
            {
                "overall_evaluation": overall,
                "status": InterviewStatus.COMPLETED,
                "completed_at": now
            },
            check_version=True
        )
        logger.info(f"Completed interview {interview.id}")
        return overall

    def _update(self, interview: Interview, changes: dict, check_version: bool = False) -> Interview:
        changes = dict(changes, updated_at=datetime.now())
        updated = self.interviews.update(
            interview.id,
            changes,
            expected_version=interview.version if check_version else None
        )
        if updated is None:
            raise NotFoundError("Interview not found")
        return updated

    def _cancel_after_failure(self, interview_id: str):
        """Mark an interview cancelled after a failure that followed a write."""
        try:
            self.cancel(interview_id)
        except (NotFoundError, InvalidStateError) as e:
            logger.error(f"Could not cancel interview {interview_id} after failure: {e.message}")
        else:
            logger.warning(f"Interview {interview_id} cancelled after upstream failure")
