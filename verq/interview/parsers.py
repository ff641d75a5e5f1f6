"""
Parsers that turn templated LLM text into evaluation objects.

The evaluators depend only on ``ResponseParser``; the regex template parsers
here are one implementation and can be swapped for a structured-output one.
"""
import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from ..errors import MalformedEvaluationError
from ..utils.logger import setup_logger
from ..utils.text_utils import strip_markdown_emphasis
from .models import (
    HIRING_DECISIONS,
    AnswerEvaluation,
    DimensionScore,
    HiringRecommendation,
    OverallEvaluation,
    RatedDimension,
)

logger = setup_logger("response_parser")

BULLET_PATTERN = re.compile(r'^\s*[-•]\s*')


def extract_scored_section(text: str, label: str) -> Optional[Tuple[int, str]]:
    """
    Find ``<label>: <score>`` followed by a ``- Brief explanation:`` line.

    Args:
        text: Model response
        label: Exact label text, e.g. "Clarity Score (1-10)"

    Returns:
        (score, explanation), or None if the block is missing
    """
    pattern = re.compile(
        re.escape(label) + r'\s*:\s*\[?(\d+)(?!\d)\]?[^\n]*\n\s*-\s*Brief explanation:\s*([^\n]+)',
        re.IGNORECASE
    )
    match = pattern.search(text)
    if not match:
        return None
    return int(match.group(1)), match.group(2).strip()


def extract_score_line(text: str, label: str) -> Optional[int]:
    """Find a bare ``<label>: <score>`` line."""
    match = re.search(re.escape(label) + r'\s*:\s*\[?(\d+)(?!\d)\]?', text, re.IGNORECASE)
    return int(match.group(1)) if match else None


def extract_bullets(text: str, label: str) -> List[str]:
    """
    Collect the dash bullets listed under ``<label>:``.

    Blank lines before the first bullet are skipped; the list ends at the
    first blank line or non-bullet line after it.
    """
    lines = text.splitlines()
    header = re.compile(r'^\s*' + re.escape(label) + r'\s*:', re.IGNORECASE)

    for index, line in enumerate(lines):
        if header.match(line):
            start = index + 1
            break
    else:
        return []

    items = []
    for line in lines[start:]:
        if not line.strip():
            if items:
                break
            continue
        if not BULLET_PATTERN.match(line):
            break
        item = BULLET_PATTERN.sub('', line).strip()
        if item:
            items.append(item)
    return items


def is_valid_score(score: Optional[int]) -> bool:
    return score is not None and 1 <= score <= 10


class ResponseParser(ABC):
    """Turns raw model output into a typed evaluation."""

    @abstractmethod
    def parse(self, text: str) -> Any:
        ...


class AnswerTemplateParser(ResponseParser):
    """
    Lenient parser for per-answer evaluations.

    A dimension that cannot be read becomes score 0 / "No feedback available"
    instead of failing the whole evaluation.
    """

    CLARITY = "Clarity Score (1-10)"
    TECHNICAL_ACCURACY = "Technical Accuracy Score (1-10)"
    LANGUAGE = "Language & Communication Score (1-10)"
    OVERALL = "Overall Score (1-10)"
    STRENGTHS = "Key Strengths"
    IMPROVEMENTS = "Areas to Improve"
    RECOMMENDATIONS = "Recommendations"

    def _dimension(self, text: str, label: str) -> DimensionScore:
        found = extract_scored_section(text, label)
        if found is None:
            logger.warning(f"Could not find '{label}' in evaluation response")
            return DimensionScore.missing()
        score, explanation = found
        if not is_valid_score(score):
            logger.warning(f"Score out of range for '{label}': {score}")
            return DimensionScore.missing()
        return DimensionScore(score=score, explanation=explanation)

    def _bullets(self, text: str, label: str) -> List[str]:
        items = extract_bullets(text, label)
        if len(items) != 3:
            logger.warning(f"Expected 3 items under '{label}', got {len(items)}")
        return items[:3]

    def parse(self, text: str) -> AnswerEvaluation:
        text = strip_markdown_emphasis(text)

        overall = extract_score_line(text, self.OVERALL)
        if not is_valid_score(overall):
            overall = 0

        return AnswerEvaluation(
            clarity=self._dimension(text, self.CLARITY),
            technical_accuracy=self._dimension(text, self.TECHNICAL_ACCURACY),
            language=self._dimension(text, self.LANGUAGE),
            strengths=self._bullets(text, self.STRENGTHS),
            areas_for_improvement=self._bullets(text, self.IMPROVEMENTS),
            recommendations=self._bullets(text, self.RECOMMENDATIONS),
            overall_score=overall
        )


class OverallTemplateParser(ResponseParser):
    """
    Strict parser for the final interview evaluation.

    Every template rule is checked and all violations are reported together
    in a ``MalformedEvaluationError``.
    """

    DIMENSIONS = (
        ("technical_proficiency", "Overall Technical Proficiency (1-10)", "technical proficiency"),
        ("communication_skills", "Communication Skills (1-10)", "communication skills"),
        ("problem_solving_ability", "Problem-Solving Ability (1-10)", "problem-solving"),
    )
    LISTS = (
        ("strengths", "Key Strengths", "strengths"),
        ("areas_for_growth", "Areas for Growth", "areas for growth"),
        ("recommendations", "Final Recommendations", "recommendations"),
    )
    OVERALL = "Overall Interview Score (1-10)"

    def _hiring_recommendation(self, text: str) -> Tuple[Optional[str], str]:
        match = re.search(r'Hiring Recommendation\s*:\s*([^\n]*)', text, re.IGNORECASE)
        if not match:
            return None, ""
        decision = match.group(1).strip().strip('[]."\'').strip().upper()

        justification = ""
        rest = text[match.end():]
        just_match = re.match(r'\s*\n\s*-\s*Justification:\s*([^\n]+)', rest, re.IGNORECASE)
        if just_match:
            justification = just_match.group(1).strip()
        return decision, justification

    def parse(self, text: str) -> OverallEvaluation:
        text = strip_markdown_emphasis(text)
        violations = []
        fields = {}

        for field_name, label, description in self.DIMENSIONS:
            found = extract_scored_section(text, label)
            if found is None:
                violations.append(f"Invalid {description} score: missing")
                continue
            score, explanation = found
            if not is_valid_score(score):
                violations.append(f"Invalid {description} score: {score}")
                continue
            fields[field_name] = RatedDimension(score=score, explanation=explanation)

        for field_name, label, description in self.LISTS:
            items = extract_bullets(text, label)
            if len(items) != 3:
                violations.append(f"Expected 3 {description}, got {len(items)}")
                continue
            fields[field_name] = items

        decision, justification = self._hiring_recommendation(text)
        if decision is None:
            violations.append("Invalid hiring decision: missing")
        elif decision not in HIRING_DECISIONS:
            violations.append(f"Invalid hiring decision: {decision}")
        else:
            fields["hiring_recommendation"] = HiringRecommendation(
                decision=decision,
                justification=justification or "No justification provided"
            )

        overall = extract_score_line(text, self.OVERALL)
        if not is_valid_score(overall):
            violations.append(f"Invalid overall score: {overall if overall is not None else 'missing'}")
        else:
            fields["overall_score"] = overall

        if violations:
            logger.error(f"Overall evaluation failed validation: {violations}")
            logger.error(f"Raw evaluation text: {text}")
            raise MalformedEvaluationError(violations)

        return OverallEvaluation(**fields)
