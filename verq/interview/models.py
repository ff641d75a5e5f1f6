"""
Interview domain models.

An ``Interview`` owns its rounds and its overall evaluation. Evaluations are
immutable value objects; ``OverallEvaluation`` refuses to be built unless
every score, list and decision is well formed.
"""
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

NO_FEEDBACK = "No feedback available"

HIRING_DECISIONS = ("STRONG HIRE", "HIRE", "CONSIDER", "DO NOT HIRE")
HiringDecision = Literal["STRONG HIRE", "HIRE", "CONSIDER", "DO NOT HIRE"]


class InterviewStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (InterviewStatus.COMPLETED, InterviewStatus.CANCELLED)


class DimensionScore(BaseModel):
    """Score for one evaluated dimension. 0 means the model output was unusable."""
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=10, description="Score 1-10, or 0 if parsing failed")
    explanation: str = Field(NO_FEEDBACK, description="One-line explanation")

    @classmethod
    def missing(cls) -> "DimensionScore":
        return cls(score=0, explanation=NO_FEEDBACK)


class RatedDimension(DimensionScore):
    """Dimension score that must be a real rating."""
    score: int = Field(..., ge=1, le=10, description="Score 1-10")


class AnswerEvaluation(BaseModel):
    """Evaluation of a single answer."""
    model_config = ConfigDict(frozen=True)

    clarity: DimensionScore
    technical_accuracy: DimensionScore
    language: DimensionScore
    strengths: List[str] = Field(default_factory=list, max_length=3)
    areas_for_improvement: List[str] = Field(default_factory=list, max_length=3)
    recommendations: List[str] = Field(default_factory=list, max_length=3)
    overall_score: int = Field(0, ge=0, le=10)

    @computed_field
    @property
    def is_degraded(self) -> bool:
        """True when any score could not be parsed."""
        return 0 in (
            self.clarity.score,
            self.technical_accuracy.score,
            self.language.score,
            self.overall_score,
        )


class HiringRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    decision: HiringDecision
    justification: str


class OverallEvaluation(BaseModel):
    """Final evaluation across all rounds of an interview."""
    model_config = ConfigDict(frozen=True)

    technical_proficiency: RatedDimension
    communication_skills: RatedDimension
    problem_solving_ability: RatedDimension
    strengths: List[str] = Field(..., min_length=3, max_length=3)
    areas_for_growth: List[str] = Field(..., min_length=3, max_length=3)
    recommendations: List[str] = Field(..., min_length=3, max_length=3)
    hiring_recommendation: HiringRecommendation
    overall_score: int = Field(..., ge=1, le=10)


class QuestionRound(BaseModel):
    """One question/answer/evaluation triple."""
    question: str
    answer: str
    evaluation: AnswerEvaluation
    timestamp: datetime = Field(default_factory=datetime.now)


class Owner(BaseModel):
    """Identity record an interview points at. Authentication lives elsewhere."""
    id: str
    email: str = ""
    display_name: str = ""
    created_at: datetime = Field(default_factory=datetime.now)


class Interview(BaseModel):
    """Root aggregate for a mock interview."""
    id: str
    owner_id: str
    job_role: str
    resume_text: str
    status: InterviewStatus = InterviewStatus.PENDING
    questions: List[QuestionRound] = Field(default_factory=list)
    overall_evaluation: Optional[OverallEvaluation] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    version: int = 0

    @property
    def round_count(self) -> int:
        return len(self.questions)

    @property
    def last_round(self) -> Optional[QuestionRound]:
        return self.questions[-1] if self.questions else None
