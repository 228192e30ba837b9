"""
Pipeline state model.

``PipelineState`` is the single per-session aggregate the workflow
orchestrator owns: the stage the user has reached plus every stage's input
and output. Only the orchestrator mutates it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .interview import InterviewQuestionSet
from .report import MatchReport


class Stage(str, Enum):
    """Workflow stages, in the only order they can be reached."""
    INTAKE = "intake"
    SCORED = "scored"
    OPTIMIZED = "optimized"
    INTERVIEW_READY = "interview_ready"

    @property
    def number(self) -> int:
        """1-based position in the workflow."""
        return _STAGE_ORDER.index(self) + 1

    @property
    def display_name(self) -> str:
        """Human-readable step label."""
        names = {
            "intake": "Upload documents",
            "scored": "ATS analysis",
            "optimized": "CV optimization",
            "interview_ready": "Interview prep",
        }
        return names.get(self.value, self.value)

    @property
    def next(self) -> Optional["Stage"]:
        """The stage a successful forward transition leads to, if any."""
        idx = _STAGE_ORDER.index(self)
        if idx + 1 < len(_STAGE_ORDER):
            return _STAGE_ORDER[idx + 1]
        return None

    def at_least(self, other: "Stage") -> bool:
        return self.number >= other.number


_STAGE_ORDER = [Stage.INTAKE, Stage.SCORED, Stage.OPTIMIZED, Stage.INTERVIEW_READY]


@dataclass
class PipelineState:
    """Everything one user session has entered and received so far."""

    stage: Stage = Stage.INTAKE

    # ── Intake ──
    resume_text: str = ""
    job_description_text: str = ""
    resume_filename: Optional[str] = None

    # ── Stage outputs ──
    match_report: Optional[MatchReport] = None
    optimized_resume_text: Optional[str] = None
    interview_question_set: Optional[InterviewQuestionSet] = None

    # ── Error slot ──
    last_error: Optional[str] = None
    last_error_kind: Optional[str] = None  # exception class name, e.g. "TransportError"

    @property
    def effective_resume_text(self) -> str:
        """The résumé downstream stages should see: optimized if available."""
        return self.optimized_resume_text or self.resume_text

    def clear_error(self) -> None:
        self.last_error = None
        self.last_error_kind = None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        return {
            "stage": self.stage.value,
            "resume_text": self.resume_text,
            "job_description_text": self.job_description_text,
            "resume_filename": self.resume_filename,
            "match_report": self.match_report.to_dict() if self.match_report else None,
            "optimized_resume_text": self.optimized_resume_text,
            "interview_question_set": (
                self.interview_question_set.to_dict() if self.interview_question_set else None
            ),
            "last_error": self.last_error,
            "last_error_kind": self.last_error_kind,
        }
