"""
Interview question set model.

Holds the result of the ``interview-questions`` service operation:
technical, behavioral (STAR) and situational questions with answer
guidance, summary counts, and general preparation tips.
"""

from dataclasses import dataclass, field
from typing import Optional

from .report import optional_str, require_fields, str_list


@dataclass
class TechnicalQuestion:
    question: str
    difficulty: Optional[str] = None   # as labelled by the service, e.g. "Hard"
    category: Optional[str] = None
    answer_points: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "difficulty": self.difficulty,
            "category": self.category,
            "answerPoints": self.answer_points,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TechnicalQuestion":
        return cls(
            question=optional_str(data.get("question")) or "",
            difficulty=optional_str(data.get("difficulty")),
            category=optional_str(data.get("category")),
            answer_points=str_list(data.get("answerPoints")),
        )


@dataclass
class BehavioralQuestion:
    """A behavioral question; answer points follow the STAR framework."""
    question: str
    answer_points: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"question": self.question, "answerPoints": self.answer_points}

    @classmethod
    def from_dict(cls, data: dict) -> "BehavioralQuestion":
        return cls(
            question=optional_str(data.get("question")) or "",
            answer_points=str_list(data.get("answerPoints")),
        )


@dataclass
class SituationalQuestion:
    question: str
    expected_approach: list[str] = field(default_factory=list)  # ordered steps
    answer_points: list[str] = field(default_factory=list)

    @property
    def approach_text(self) -> str:
        """Expected approach as a single arrow-joined line."""
        return " → ".join(self.expected_approach)

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "expectedApproach": self.expected_approach,
            "answerPoints": self.answer_points,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SituationalQuestion":
        return cls(
            question=optional_str(data.get("question")) or "",
            expected_approach=str_list(data.get("expectedApproach")),
            answer_points=str_list(data.get("answerPoints")),
        )


@dataclass
class QuestionSummary:
    total_questions: int = 0
    technical_count: int = 0
    behavioral_count: int = 0
    situational_count: int = 0

    def to_dict(self) -> dict:
        return {
            "totalQuestions": self.total_questions,
            "technicalCount": self.technical_count,
            "behavioralCount": self.behavioral_count,
            "situationalCount": self.situational_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuestionSummary":
        def _int(key: str) -> int:
            try:
                return int(data.get(key) or 0)
            except (TypeError, ValueError, OverflowError):
                # Non-numeric, or a float such as 1e400 that decodes to inf
                return 0

        return cls(
            total_questions=_int("totalQuestions"),
            technical_count=_int("technicalCount"),
            behavioral_count=_int("behavioralCount"),
            situational_count=_int("situationalCount"),
        )


@dataclass
class InterviewQuestionSet:
    """Complete interview preparation pack."""

    technical_questions: list[TechnicalQuestion] = field(default_factory=list)
    behavioral_questions: list[BehavioralQuestion] = field(default_factory=list)
    situational_questions: list[SituationalQuestion] = field(default_factory=list)
    preparation_tips: list[str] = field(default_factory=list)

    # None when the service sent no summary block
    summary: Optional[QuestionSummary] = None

    raw: dict = field(default_factory=dict)

    REQUIRED_FIELDS = [
        "summary",
        "technicalQuestions",
        "behavioralQuestions",
        "situationalQuestions",
    ]

    @property
    def question_count(self) -> int:
        """Number of questions actually received (may differ from summary)."""
        return (
            len(self.technical_questions)
            + len(self.behavioral_questions)
            + len(self.situational_questions)
        )

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict() if self.summary else None,
            "technicalQuestions": [q.to_dict() for q in self.technical_questions],
            "behavioralQuestions": [q.to_dict() for q in self.behavioral_questions],
            "situationalQuestions": [q.to_dict() for q in self.situational_questions],
            "preparationTips": self.preparation_tips,
        }

    @classmethod
    def from_dict(cls, data: dict, strict: bool = False) -> "InterviewQuestionSet":
        """
        Build a question set from the service's ``data`` object.

        Args:
            data: The ``data`` payload of a successful ``interview-questions`` call.
            strict: If True, missing required sections raise MalformedResponse.
        """
        if strict:
            require_fields(data, cls.REQUIRED_FIELDS, "interview-questions")

        def _items(key: str) -> list[dict]:
            value = data.get(key)
            if not isinstance(value, list):
                return []
            return [item for item in value if isinstance(item, dict)]

        summary = data.get("summary")
        return cls(
            technical_questions=[TechnicalQuestion.from_dict(q) for q in _items("technicalQuestions")],
            behavioral_questions=[BehavioralQuestion.from_dict(q) for q in _items("behavioralQuestions")],
            situational_questions=[SituationalQuestion.from_dict(q) for q in _items("situationalQuestions")],
            preparation_tips=str_list(data.get("preparationTips")),
            summary=QuestionSummary.from_dict(summary) if isinstance(summary, dict) else None,
            raw=data,
        )
