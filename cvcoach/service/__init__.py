"""Analysis service access."""

from .client import (
    AnalysisClient,
    ATS_ANALYSIS,
    INTERVIEW_QUESTIONS,
    OPERATIONS,
    OPTIMIZE_CV,
)

__all__ = [
    "AnalysisClient",
    "ATS_ANALYSIS",
    "INTERVIEW_QUESTIONS",
    "OPERATIONS",
    "OPTIMIZE_CV",
]
