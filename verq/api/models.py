"""
FastAPI request and response models.
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..interview.models import (
    AnswerEvaluation,
    Interview,
    OverallEvaluation,
    QuestionRound,
)


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Service status")
    llm_ready: bool = Field(..., description="Whether the language model is configured")
    storage_dir: str = Field(..., description="Where interviews are stored")


class RegisterUserRequest(BaseModel):
    """Request model for registering an interview owner."""
    user_id: str = Field(..., min_length=1, description="Opaque user id from the identity provider")
    email: str = Field("", description="User email")
    display_name: str = Field("", description="Name shown in the UI")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "firebase-uid-123",
                "email": "jane@example.com",
                "display_name": "Jane Smith"
            }
        }


class UserResponse(BaseModel):
    id: str = Field(..., description="User id")
    email: str = Field(..., description="User email")
    display_name: str = Field(..., description="Display name")
    created_at: datetime = Field(..., description="Registration time")


class InterviewStartData(BaseModel):
    """Payload for a started interview."""
    interview_id: str = Field(..., description="Interview ID")
    question: str = Field(..., description="First question")
    status: str = Field(..., description="Interview status")


class AnswerData(BaseModel):
    """Payload after an answer was recorded."""
    is_complete: bool = Field(..., description="Whether this was the final round")
    evaluation: AnswerEvaluation = Field(..., description="Evaluation of this answer")
    next_question: Optional[str] = Field(None, description="Next question (if not complete)")
    overall_evaluation: Optional[OverallEvaluation] = Field(
        None, description="Overall evaluation (if complete)"
    )


class FollowUpData(BaseModel):
    next_question: str = Field(..., description="Follow-up question")


class InterviewSummary(BaseModel):
    """List view of an interview."""
    id: str = Field(..., description="Interview ID")
    job_role: str = Field(..., description="Job role")
    status: str = Field(..., description="Interview status")
    answered_questions: int = Field(..., description="Number of answered questions")
    overall_score: Optional[int] = Field(None, description="Overall score (if completed)")
    hiring_decision: Optional[str] = Field(None, description="Hiring decision (if completed)")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last update time")

    @classmethod
    def from_interview(cls, interview: Interview) -> "InterviewSummary":
        overall = interview.overall_evaluation
        return cls(
            id=interview.id,
            job_role=interview.job_role,
            status=interview.status.value,
            answered_questions=interview.round_count,
            overall_score=overall.overall_score if overall else None,
            hiring_decision=overall.hiring_recommendation.decision if overall else None,
            created_at=interview.created_at,
            updated_at=interview.updated_at
        )


class InterviewDetail(BaseModel):
    """Full view of an interview."""
    id: str = Field(..., description="Interview ID")
    owner_id: str = Field(..., description="Owner ID")
    job_role: str = Field(..., description="Job role")
    status: str = Field(..., description="Interview status")
    questions: List[QuestionRound] = Field(..., description="Answered rounds, oldest first")
    overall_evaluation: Optional[OverallEvaluation] = Field(None, description="Overall evaluation")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last update time")
    completed_at: Optional[datetime] = Field(None, description="Completion time")

    @classmethod
    def from_interview(cls, interview: Interview) -> "InterviewDetail":
        return cls(
            id=interview.id,
            owner_id=interview.owner_id,
            job_role=interview.job_role,
            status=interview.status.value,
            questions=interview.questions,
            overall_evaluation=interview.overall_evaluation,
            created_at=interview.created_at,
            updated_at=interview.updated_at,
            completed_at=interview.completed_at
        )


class SuccessResponse(BaseModel):
    """Envelope for successful responses."""
    status: str = Field("success", description="Always 'success'")
    data: Any = Field(..., description="Response payload")


class ErrorResponse(BaseModel):
    """Envelope for failed responses."""
    status: str = Field("error", description="Always 'error'")
    message: str = Field(..., description="Human-readable error message")
