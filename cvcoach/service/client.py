"""
Analysis service client.

A single generic request/response adapter for the hosted analysis
workflows. Each logical operation is one webhook under the service root:

    POST {base_url}/ats-analysis          {cv, jobDescription, userId}
    POST {base_url}/optimize-cv           {cv, jobDescription, missingKeywords, userId}
    POST {base_url}/interview-questions   {cv, jobDescription, userId}

Every webhook answers with the same envelope:

    {"success": true,  "data": {...}}
    {"success": false, "error": {"message": "..."}}

Usage:
    client = AnalysisClient(config.service, user_id_provider=session.get_user_id)
    data = client.invoke("ats-analysis", {"cv": cv, "jobDescription": jd})

The client never retries and never reinterprets ``data``; both are the
orchestrator's concern.
"""

import logging
import time
from typing import Any, Callable, Optional

import httpx

from ..config import ServiceConfig
from ..errors import MalformedResponse, RemoteOperationError, TransportError

logger = logging.getLogger(__name__)

ATS_ANALYSIS = "ats-analysis"
OPTIMIZE_CV = "optimize-cv"
INTERVIEW_QUESTIONS = "interview-questions"

OPERATIONS = (ATS_ANALYSIS, OPTIMIZE_CV, INTERVIEW_QUESTIONS)

GENERIC_FAILURE = "Request failed"


class AnalysisClient:
    """
    Wrapper around the analysis service webhooks.

    Provides:
      - invoke(operation, payload) -> data
      - on_request_start / on_request_end hooks for progress indicators
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        user_id_provider: Callable[[], Optional[str]] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Service URL, timeouts and anonymous user id.
            user_id_provider: Returns the signed-in user's id, or None.
            transport: Custom httpx transport (tests use httpx.MockTransport).
        """
        self.config = config or ServiceConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self._user_id_provider = user_id_provider
        self._transport = transport

        self._http_timeout = httpx.Timeout(
            timeout=self.config.timeout,
            connect=self.config.connect_timeout,
        )

        # Called with the operation name around every request
        self.on_request_start: Callable[[str], None] | None = None
        self.on_request_end: Callable[[str], None] | None = None

    # ════════════════════════════════════════════════════════════════════
    # PUBLIC API
    # ════════════════════════════════════════════════════════════════════

    @property
    def user_id(self) -> str:
        """Current user id, or the anonymous sentinel."""
        user_id = self._user_id_provider() if self._user_id_provider else None
        return user_id or self.config.anonymous_user_id

    def invoke(self, operation: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Run one service operation and return its ``data`` payload.

        Args:
            operation: One of ``ats-analysis``, ``optimize-cv``,
                ``interview-questions``.
            payload: Operation-specific request fields.

        Returns:
            The envelope's ``data`` object, unchanged.

        Raises:
            ValueError: If ``operation`` is not a known operation.
            TransportError: If no usable response was received.
            RemoteOperationError: If the service reported failure.
            MalformedResponse: If the envelope does not have the agreed shape.
        """
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown operation '{operation}'. Expected one of: {', '.join(OPERATIONS)}")

        body = {**payload, "userId": self.user_id}

        if self.on_request_start:
            self.on_request_start(operation)
        start = time.monotonic()
        try:
            response = self._post(operation, body)
            envelope = self._decode(operation, response)
            data = self._unwrap(operation, envelope)
        finally:
            if self.on_request_end:
                self.on_request_end(operation)

        logger.info(f"{operation} succeeded in {time.monotonic() - start:.1f}s")
        return data

    # ════════════════════════════════════════════════════════════════════
    # INTERNAL HTTP HELPERS
    # ════════════════════════════════════════════════════════════════════

    def _http_headers(self) -> dict:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    def _post(self, operation: str, body: dict) -> httpx.Response:
        url = f"{self.base_url}/{operation}"
        logger.debug(f"POST {url}")
        try:
            with httpx.Client(timeout=self._http_timeout, transport=self._transport) as http:
                return http.post(url, json=body, headers=self._http_headers())
        except httpx.ConnectTimeout:
            raise TransportError(
                f"Connection to the analysis service timed out after {self.config.connect_timeout:g}s"
            )
        except httpx.TimeoutException:
            raise TransportError(
                f"The analysis service did not respond within {self.config.timeout:g}s"
            )
        except httpx.ConnectError as e:
            raise TransportError(f"Could not connect to {self.base_url}: {e}")
        except httpx.HTTPError as e:
            raise TransportError(str(e) or f"Network request failed ({type(e).__name__})")

    @staticmethod
    def _decode(operation: str, response: httpx.Response) -> Any:
        """Parse the response body as JSON regardless of status code."""
        try:
            return response.json()
        except ValueError:
            # No envelope to read. Report the HTTP status if it explains why.
            if response.is_error:
                raise TransportError(
                    f"{operation} returned HTTP {response.status_code} without a JSON body"
                )
            raise TransportError(f"{operation} returned a response that is not valid JSON")

    @staticmethod
    def _unwrap(operation: str, envelope: Any) -> dict[str, Any]:
        """Validate the envelope and return its ``data``."""
        if not isinstance(envelope, dict):
            raise MalformedResponse(f"{operation} returned {type(envelope).__name__}, expected an object")

        success = envelope.get("success")
        if not isinstance(success, bool):
            raise MalformedResponse(f"{operation} response has no boolean 'success' flag")

        if not success:
            error = envelope.get("error")
            message = error.get("message") if isinstance(error, dict) else None
            logger.warning(f"{operation} reported failure: {message or GENERIC_FAILURE}")
            raise RemoteOperationError(message or GENERIC_FAILURE)

        data = envelope.get("data")
        if not isinstance(data, dict):
            raise MalformedResponse(f"{operation} succeeded but returned no 'data' object")
        return data
