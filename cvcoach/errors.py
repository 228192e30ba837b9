"""
Failure taxonomy for the CV coaching pipeline.

Every failure the pipeline can report to a user is one of these classes, so
callers can catch the whole family with a single except clause:

    try:
        doc = extract_document(data, "application/pdf")
    except CVCoachError as e:
        print(f"Could not use that file: {e}")

Exception Hierarchy:
    CVCoachError (base)
    ├── ValidationError          - missing, oversized or wrong-kind input
    │   └── UnsupportedFormat    - declared media kind is not accepted
    ├── ExtractionError          - a document could not be turned into text
    │   ├── EngineUnavailable    - no PDF engine could be imported
    │   ├── InsufficientText     - text layer too thin (scanned PDF)
    │   └── DocumentParseError   - every engine failed to parse the file
    ├── ServiceError             - the analysis service call failed
    │   ├── TransportError       - network, timeout or undecodable body
    │   └── RemoteOperationError - service answered success=false
    │       └── MalformedResponse - envelope or data shape mismatch
    └── WorkflowError            - orchestration rules were violated
        └── StageOrderError      - operation invoked in the wrong stage
"""


class CVCoachError(Exception):
    """Base exception for all pipeline errors."""
    pass


# ════════════════════════════════════════════════════════════════════════════
# INPUT VALIDATION
# ════════════════════════════════════════════════════════════════════════════


class ValidationError(CVCoachError):
    """
    Raised when user input is missing, too large, or of the wrong kind.

    Reported immediately; no extraction or service call is attempted.
    """
    pass


class UnsupportedFormat(ValidationError):
    """Raised when a document's declared media kind is not text or PDF."""
    pass


# ════════════════════════════════════════════════════════════════════════════
# DOCUMENT EXTRACTION
# ════════════════════════════════════════════════════════════════════════════


class ExtractionError(CVCoachError):
    """Base class for failures while turning a document into text."""
    pass


class EngineUnavailable(ExtractionError):
    """
    Raised when no PDF rendering engine can be loaded.

    Resolution:
    1. Install one: pip install pdfplumber pypdf
    2. Or upload the résumé as a .txt file / paste it as text
    """
    pass


class InsufficientText(ExtractionError):
    """
    Raised when a PDF yields fewer usable characters than the minimum.

    Almost always a scanned or image-only PDF with no text layer.
    """
    pass


class DocumentParseError(ExtractionError):
    """Raised when every available engine failed to parse the document."""
    pass


# ════════════════════════════════════════════════════════════════════════════
# ANALYSIS SERVICE
# ════════════════════════════════════════════════════════════════════════════


class ServiceError(CVCoachError):
    """Base class for failures talking to the analysis service."""
    pass


class TransportError(ServiceError):
    """
    Raised when no usable response came back from the analysis service.

    Common causes:
    - Service unreachable (DNS, firewall, wrong base URL)
    - Request exceeded the configured timeout
    - Response body was not valid JSON (HTML error page, proxy error)
    """
    pass


class RemoteOperationError(ServiceError):
    """Raised when the service answered with ``success: false``."""
    pass


class MalformedResponse(RemoteOperationError):
    """Raised when the envelope or its ``data`` does not have the agreed shape."""
    pass


# ════════════════════════════════════════════════════════════════════════════
# WORKFLOW
# ════════════════════════════════════════════════════════════════════════════


class WorkflowError(CVCoachError):
    """Base class for orchestration rule violations."""
    pass


class StageOrderError(WorkflowError):
    """Raised when an operation is invoked before its stage is reached."""
    pass
