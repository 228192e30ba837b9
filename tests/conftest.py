"""Shared fixtures: in-memory PDFs, canned service payloads, a scripted client."""

import threading

import pytest

from cvcoach.config import Config


def build_pdf(pages: list[str]) -> bytes:
    """
    Build a minimal valid PDF with Helvetica text.

    Each entry of ``pages`` is one page; newlines in an entry start a new
    line further down the page.
    """
    n = len(pages)
    page_ids = [4 + 2 * i for i in range(n)]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {n} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, page_text in enumerate(pages):
        content_id = page_ids[i] + 1
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
            ).encode()
        )
        ops = ["BT", "/F1 12 Tf", "72 720 Td"]
        for j, line in enumerate(page_text.split("\n")):
            escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
            if j:
                ops.append("0 -18 Td")
            ops.append(f"({escaped}) Tj")
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{num} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


ATS_DATA = {
    "atsScore": 72,
    "matchedKeywords": ["SQL", "Python"],
    "missingKeywords": ["Kubernetes"],
    "analysis": {
        "strengths": ["Solid data engineering background"],
        "weaknesses": ["No container orchestration experience"],
    },
    "suggestions": ["Add K8s experience", "Quantify pipeline throughput"],
}

OPTIMIZE_DATA = {
    "optimizedCV": "Jane Doe\nData Engineer\nPython, SQL, Kubernetes\n",
}

INTERVIEW_DATA = {
    "summary": {
        "totalQuestions": 3,
        "technicalCount": 1,
        "behavioralCount": 1,
        "situationalCount": 1,
    },
    "technicalQuestions": [
        {
            "question": "How would you deploy a batch job on Kubernetes?",
            "difficulty": "Medium",
            "category": "Infrastructure",
            "answerPoints": ["CronJob resource", "Resource limits"],
        }
    ],
    "behavioralQuestions": [
        {
            "question": "Tell me about a failed migration.",
            "answerPoints": ["Situation", "Task", "Action", "Result"],
        }
    ],
    "situationalQuestions": [
        {
            "question": "A nightly load is late. What do you do?",
            "expectedApproach": ["Triage", "Communicate", "Fix"],
            "answerPoints": ["Check upstream sources"],
        }
    ],
    "preparationTips": ["Review the company's data stack"],
}

RESUME = "Jane Doe\nData Engineer with six years of Python and SQL pipelines."
JOB_DESCRIPTION = "We need a data engineer with Python, SQL and Kubernetes."


class FakeClient:
    """
    Stand-in for AnalysisClient.

    ``responses`` maps operation name to a list of results handed out in
    order; a result that is an exception instance is raised instead.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = {op: list(items) for op, items in (responses or {}).items()}
        self.calls: list[tuple[str, dict]] = []

    def invoke(self, operation: str, payload: dict) -> dict:
        self.calls.append((operation, payload))
        result = self.responses[operation].pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class BlockingClient(FakeClient):
    """FakeClient whose calls wait until ``release`` is set."""

    def __init__(self, responses: dict | None = None):
        super().__init__(responses)
        self.started = threading.Event()
        self.release = threading.Event()

    def invoke(self, operation: str, payload: dict) -> dict:
        self.started.set()
        assert self.release.wait(timeout=5), "test never released the client"
        return super().invoke(operation, payload)


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def happy_client() -> FakeClient:
    return FakeClient({
        "ats-analysis": [ATS_DATA],
        "optimize-cv": [OPTIMIZE_DATA],
        "interview-questions": [INTERVIEW_DATA],
    })
