"""
Mock interview pipeline.

This module provides:
- Question generation (fresh and follow-up)
- Answer evaluation and overall evaluation
- Interview session state machine
"""

from .models import (
    AnswerEvaluation,
    DimensionScore,
    HiringRecommendation,
    Interview,
    InterviewStatus,
    OverallEvaluation,
    Owner,
    QuestionRound,
)
from .parsers import AnswerTemplateParser, OverallTemplateParser, ResponseParser
from .question_generator import QuestionGenerator
from .answer_evaluator import AnswerEvaluator
from .overall_evaluator import OverallEvaluator
from .repository import InterviewRepository, OwnerRepository
from .session_manager import InterviewSession, StartResult, SubmitResult

__all__ = [
    'AnswerEvaluation',
    'DimensionScore',
    'HiringRecommendation',
    'Interview',
    'InterviewStatus',
    'OverallEvaluation',
    'Owner',
    'QuestionRound',
    'ResponseParser',
    'AnswerTemplateParser',
    'OverallTemplateParser',
    'QuestionGenerator',
    'AnswerEvaluator',
    'OverallEvaluator',
    'InterviewRepository',
    'OwnerRepository',
    'InterviewSession',
    'StartResult',
    'SubmitResult'
]
