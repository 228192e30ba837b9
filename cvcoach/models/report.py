"""
Match report model.

Holds the result of the ``ats-analysis`` service operation: how well a
résumé matches a job description, which keywords line up, and what to
improve.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..errors import MalformedResponse


def str_list(value: Any) -> list[str]:
    """Coerce a JSON list of scalars to a list of strings; anything else is empty."""
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def optional_str(value: Any) -> Optional[str]:
    """A JSON scalar as text; None (or a missing field) stays None."""
    return None if value is None else str(value)


def require_fields(data: dict, fields: list[str], operation: str) -> None:
    """
    Raise MalformedResponse if any of ``fields`` is absent from ``data``.

    Dotted names (``analysis.strengths``) descend into nested objects.
    """
    missing = []
    for name in fields:
        node: Any = data
        for part in name.split("."):
            if not isinstance(node, dict) or part not in node:
                missing.append(name)
                break
            node = node[part]
    if missing:
        raise MalformedResponse(
            f"'{operation}' response is missing required field(s): {', '.join(missing)}"
        )


@dataclass
class MatchReport:
    """Résumé / job description match assessment."""

    ats_score: Optional[float] = None                     # 0-100
    matched_keywords: list[str] = field(default_factory=list)
    missing_keywords: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)  # ranked, most important first

    # Untouched ``data`` payload from the service
    raw: dict = field(default_factory=dict)

    REQUIRED_FIELDS = ["atsScore", "matchedKeywords", "missingKeywords", "suggestions"]

    @property
    def has_analysis(self) -> bool:
        return bool(self.strengths or self.weaknesses)

    def to_dict(self) -> dict:
        return {
            "atsScore": self.ats_score,
            "matchedKeywords": self.matched_keywords,
            "missingKeywords": self.missing_keywords,
            "analysis": {
                "strengths": self.strengths,
                "weaknesses": self.weaknesses,
            },
            "suggestions": self.suggestions,
        }

    @classmethod
    def from_dict(cls, data: dict, strict: bool = False) -> "MatchReport":
        """
        Build a report from the service's ``data`` object.

        Args:
            data: The ``data`` payload of a successful ``ats-analysis`` call.
            strict: If True, missing required fields or an out-of-range
                score raise MalformedResponse. Otherwise absent parts
                are left empty.
        """
        if strict:
            require_fields(data, cls.REQUIRED_FIELDS, "ats-analysis")

        score = data.get("atsScore")
        if score is not None:
            try:
                score = float(score)
            except (TypeError, ValueError):
                if strict:
                    raise MalformedResponse(f"atsScore is not a number: {score!r}")
                score = None
        if strict and score is not None and not 0 <= score <= 100:
            raise MalformedResponse(f"atsScore out of range 0-100: {score}")
        if score is not None and score.is_integer():
            score = int(score)

        analysis = data.get("analysis")
        if not isinstance(analysis, dict):
            analysis = {}

        return cls(
            ats_score=score,
            matched_keywords=str_list(data.get("matchedKeywords")),
            missing_keywords=str_list(data.get("missingKeywords")),
            strengths=str_list(analysis.get("strengths")),
            weaknesses=str_list(analysis.get("weaknesses")),
            suggestions=str_list(data.get("suggestions")),
            raw=data,
        )
