"""Data models for the CV coaching pipeline."""

from .document import ExtractedDocument
from .report import MatchReport
from .interview import (
    InterviewQuestionSet,
    TechnicalQuestion,
    BehavioralQuestion,
    SituationalQuestion,
    QuestionSummary,
)
from .state import PipelineState, Stage

__all__ = [
    "ExtractedDocument",
    "MatchReport",
    "InterviewQuestionSet",
    "TechnicalQuestion",
    "BehavioralQuestion",
    "SituationalQuestion",
    "QuestionSummary",
    "PipelineState",
    "Stage",
]
