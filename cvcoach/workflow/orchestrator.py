"""
Workflow orchestrator.

Drives one user session through the four stages:

    Intake ──run_scoring──▶ Scored ──run_optimization──▶ Optimized
           ──run_interview_prep──▶ InterviewReady

    reset: any stage ──▶ Intake

Rules every operation follows:

- Only one operation (document extraction or service call) runs at a time.
  Anything started while one is in flight is refused and changes nothing.
- The error slot is cleared when an operation starts and set when it fails.
  Failures never propagate to the caller; they are reported through
  ``state.last_error`` and a False return value.
- A stage's output and the stage advance are committed together, after the
  response has been validated. A failed stage leaves the state untouched.
- ``reset`` may be called at any time. A service call that is still in
  flight when the session is reset has its result thrown away.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from ..config import Config
from ..errors import (
    CVCoachError,
    MalformedResponse,
    ServiceError,
    StageOrderError,
    ValidationError,
)
from ..extraction import extract_document
from ..models import InterviewQuestionSet, MatchReport, PipelineState, Stage
from ..service.client import ATS_ANALYSIS, INTERVIEW_QUESTIONS, OPTIMIZE_CV, AnalysisClient
from ..session import SessionContext
from .export import write_optimized_resume

logger = logging.getLogger(__name__)

# Prefix for service failures, per operation
FAILURE_PREFIXES = {
    "run_scoring": "Scoring failed",
    "run_optimization": "Optimization failed",
    "run_interview_prep": "Interview question generation failed",
}

# What to do first when an operation is invoked before its stage
STAGE_HINTS = {
    Stage.INTAKE: "Start over to change your inputs.",
    Stage.SCORED: "Run the ATS analysis first.",
    Stage.OPTIMIZED: "Optimize your CV first.",
}


class WorkflowOrchestrator:
    """
    State machine for one user session.

    Usage:
        orchestrator = WorkflowOrchestrator.from_config(config, session)
        orchestrator.load_resume_document(pdf_bytes, "application/pdf", "cv.pdf")
        orchestrator.set_job_description(jd_text)

        if not orchestrator.run_scoring():
            print(orchestrator.state.last_error)
    """

    def __init__(
        self,
        client: AnalysisClient,
        config: Config | None = None,
        on_busy_change: Callable[[bool], None] | None = None,
    ):
        """
        Args:
            client: Anything with ``invoke(operation, payload) -> dict``.
            config: Pipeline configuration (defaults to Config()).
            on_busy_change: Called with True/False when an operation
                starts/finishes, for progress indicators.
        """
        self.client = client
        self.config = config or Config()
        self.on_busy_change = on_busy_change
        self.state = PipelineState()

        # Held for the duration of any operation; never waited on
        self._busy_lock = threading.Lock()
        # Serializes commits against reset
        self._state_lock = threading.RLock()
        # Bumped by reset; results from an older generation are discarded
        self._generation = 0

    @classmethod
    def from_config(cls, config: Config, session: SessionContext | None = None) -> "WorkflowOrchestrator":
        """Build an orchestrator with its client; signing out resets it."""
        client = AnalysisClient(
            config.service,
            user_id_provider=session.get_user_id if session else None,
        )
        orchestrator = cls(client, config)
        if session is not None:
            session.on_logout(orchestrator.reset)
        return orchestrator

    # ════════════════════════════════════════════════════════════════════
    # STATUS
    # ════════════════════════════════════════════════════════════════════

    @property
    def busy(self) -> bool:
        return self._busy_lock.locked()

    @property
    def stage(self) -> Stage:
        return self.state.stage

    def snapshot(self) -> dict:
        """JSON-serializable view of the session."""
        with self._state_lock:
            data = self.state.to_dict()
        data["busy"] = self.busy
        return data

    # ════════════════════════════════════════════════════════════════════
    # INTAKE
    # ════════════════════════════════════════════════════════════════════

    def set_resume_text(self, text: str) -> bool:
        """Use pasted text as the résumé."""
        def step():
            self._require_inputs_open()
            self._check_length(text, "Résumé")

            def commit():
                self.state.resume_text = text
                self.state.resume_filename = None
            return commit

        return self._run("set_resume_text", step)

    def set_job_description(self, text: str) -> bool:
        def step():
            self._require_inputs_open()
            self._check_length(text, "Job description")

            def commit():
                self.state.job_description_text = text
            return commit

        return self._run("set_job_description", step)

    def load_resume_document(self, data: bytes, media_kind: str, filename: str | None = None) -> bool:
        """Extract text from an uploaded résumé and use it as the résumé."""
        def step():
            self._require_inputs_open()
            doc = extract_document(data, media_kind, filename=filename, config=self.config.extraction)
            self._check_length(doc.text, "Résumé")

            def commit():
                self.state.resume_text = doc.text
                self.state.resume_filename = filename
            return commit

        return self._run("load_resume_document", step)

    # ════════════════════════════════════════════════════════════════════
    # STAGE TRANSITIONS
    # ════════════════════════════════════════════════════════════════════

    def run_scoring(self) -> bool:
        """Intake → Scored: score the résumé against the job description."""
        def step():
            self._require_stage(Stage.INTAKE, Stage.SCORED)
            resume = self.state.resume_text
            job_description = self.state.job_description_text
            if not resume.strip() or not job_description.strip():
                raise ValidationError("Please provide both your résumé and the job description.")

            data = self.client.invoke(ATS_ANALYSIS, {
                "cv": resume,
                "jobDescription": job_description,
            })
            report = MatchReport.from_dict(data, strict=self._strict)

            def commit():
                self.state.match_report = report
                self.state.stage = Stage.SCORED
                logger.info(f"Stage committed: {Stage.SCORED.display_name} (score {report.ats_score})")
            return commit

        return self._run("run_scoring", step)

    def run_optimization(self) -> bool:
        """Scored → Optimized: rewrite the résumé around the missing keywords."""
        def step():
            self._require_stage(Stage.SCORED, Stage.OPTIMIZED)
            report = self.state.match_report
            if report is None:
                raise StageOrderError(f"No match report available. {STAGE_HINTS[Stage.SCORED]}")

            data = self.client.invoke(OPTIMIZE_CV, {
                "cv": self.state.resume_text,
                "jobDescription": self.state.job_description_text,
                "missingKeywords": list(report.missing_keywords),
            })
            optimized = data.get("optimizedCV")
            if not isinstance(optimized, str):
                raise MalformedResponse("optimize-cv response has no 'optimizedCV' text")

            def commit():
                self.state.optimized_resume_text = optimized
                self.state.stage = Stage.OPTIMIZED
                logger.info(f"Stage committed: {Stage.OPTIMIZED.display_name} ({len(optimized)} chars)")
            return commit

        return self._run("run_optimization", step)

    def run_interview_prep(self) -> bool:
        """Optimized → InterviewReady: generate interview questions."""
        def step():
            self._require_stage(Stage.OPTIMIZED, Stage.INTERVIEW_READY)
            if self.state.optimized_resume_text is None:
                raise StageOrderError(f"No optimized CV available. {STAGE_HINTS[Stage.OPTIMIZED]}")

            data = self.client.invoke(INTERVIEW_QUESTIONS, {
                "cv": self.state.effective_resume_text,
                "jobDescription": self.state.job_description_text,
            })
            question_set = InterviewQuestionSet.from_dict(data, strict=self._strict)

            def commit():
                self.state.interview_question_set = question_set
                self.state.stage = Stage.INTERVIEW_READY
                logger.info(
                    f"Stage committed: {Stage.INTERVIEW_READY.display_name} "
                    f"({question_set.question_count} questions)"
                )
            return commit

        return self._run("run_interview_prep", step)

    def reset(self) -> None:
        """Return to an empty Intake state. Never fails."""
        with self._state_lock:
            self._generation += 1
            self.state = PipelineState()
        if self.busy:
            logger.info("Session reset; the operation in flight will be discarded")
        else:
            logger.info("Session reset")

    # ════════════════════════════════════════════════════════════════════
    # EXPORT
    # ════════════════════════════════════════════════════════════════════

    def export_optimized_resume(self, directory: str | Path | None = None) -> Optional[Path]:
        """
        Write the optimized résumé to ``optimized_cv_<epoch-millis>.txt``.

        Returns:
            The written path, or None (with ``state.last_error`` set).
        """
        with self._state_lock:
            self.state.clear_error()
            text = self.state.optimized_resume_text
            if not self.state.stage.at_least(Stage.OPTIMIZED) or text is None:
                self._record_failure("export", StageOrderError(
                    f"There is no optimized CV to export yet. {STAGE_HINTS[Stage.OPTIMIZED]}"
                ))
                return None

        try:
            return write_optimized_resume(text, directory or self.config.workflow.export_dir)
        except OSError as e:
            with self._state_lock:
                self.state.last_error = f"Export failed: {e}"
                self.state.last_error_kind = type(e).__name__
            logger.error(f"Export failed: {e}")
            return None

    # ════════════════════════════════════════════════════════════════════
    # INTERNALS
    # ════════════════════════════════════════════════════════════════════

    @property
    def _strict(self) -> bool:
        return self.config.workflow.strict_response_shapes

    def _require_stage(self, required: Stage, target: Stage) -> None:
        current = self.state.stage
        if current == required:
            return
        if current.at_least(target):
            raise StageOrderError(
                f"'{target.display_name}' is already done. {STAGE_HINTS[Stage.INTAKE]}"
            )
        raise StageOrderError(
            f"'{target.display_name}' is not available yet. {STAGE_HINTS[required]}"
        )

    def _require_inputs_open(self) -> None:
        if self.state.stage != Stage.INTAKE:
            raise ValidationError(
                f"Inputs are locked once the analysis has run. {STAGE_HINTS[Stage.INTAKE]}"
            )

    def _check_length(self, text: str, label: str) -> None:
        limit = self.config.extraction.max_text_chars
        if len(text) > limit:
            raise ValidationError(f"{label} is too long ({len(text):,} characters, maximum {limit:,}).")

    def _set_busy(self, busy: bool) -> None:
        if self.on_busy_change:
            self.on_busy_change(busy)

    def _record_failure(self, operation: str, error: CVCoachError) -> None:
        message = str(error)
        if isinstance(error, ServiceError) and operation in FAILURE_PREFIXES:
            message = f"{FAILURE_PREFIXES[operation]}: {message}"
        self.state.last_error = message
        self.state.last_error_kind = type(error).__name__
        logger.error(f"{operation} failed ({type(error).__name__}): {error}")

    def _run(self, operation: str, step: Callable[[], Callable[[], None]]) -> bool:
        """
        Run ``step`` under the single-operation guard.

        ``step`` checks preconditions, does the slow work, and returns a
        ``commit`` callable that applies the result to the state. Nothing
        touches the state until ``commit`` runs.
        """
        if not self._busy_lock.acquire(blocking=False):
            logger.warning(f"{operation} refused: another operation is in progress")
            return False

        try:
            with self._state_lock:
                generation = self._generation
                self.state.clear_error()
            self._set_busy(True)

            try:
                commit = step()
            except CVCoachError as e:
                with self._state_lock:
                    if generation == self._generation:
                        self._record_failure(operation, e)
                    else:
                        logger.info(f"{operation} failed after reset; error discarded")
                return False

            with self._state_lock:
                if generation != self._generation:
                    logger.info(f"{operation} finished after reset; result discarded")
                    return False
                commit()
            return True
        finally:
            # Listeners hear about the finish while the guard is still held
            try:
                self._set_busy(False)
            finally:
                self._busy_lock.release()
