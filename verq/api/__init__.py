"""
FastAPI API modules.
"""
from .models import (
    HealthResponse,
    RegisterUserRequest,
    UserResponse,
    InterviewStartData,
    AnswerData,
    FollowUpData,
    InterviewSummary,
    InterviewDetail,
    SuccessResponse,
    ErrorResponse
)
from .service import InterviewService, build_session, get_service

__all__ = [
    'HealthResponse',
    'RegisterUserRequest',
    'UserResponse',
    'InterviewStartData',
    'AnswerData',
    'FollowUpData',
    'InterviewSummary',
    'InterviewDetail',
    'SuccessResponse',
    'ErrorResponse',
    'InterviewService',
    'build_session',
    'get_service'
]
