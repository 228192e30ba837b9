"""
Configuration for the CV coaching pipeline.

Central configuration for the analysis service connection, document
extraction limits, workflow behaviour, and session persistence.

There are three ways to customize a run:

1. **Edit this file directly**: change defaults in the dataclasses below.
2. **Set environment variables**: ``CVCOACH_SERVICE_URL`` and
   ``CVCOACH_TIMEOUT`` override the service section (see ``Config.from_env``).
3. **Use a YAML profile**: pass ``--config profiles/my-setup.yaml`` on the
   CLI.  Any section present in the YAML overrides the matching defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


# Webhook root of the hosted analysis workflows
DEFAULT_SERVICE_URL = "https://lohelen24.app.n8n.cloud/webhook"

ENV_SERVICE_URL = "CVCOACH_SERVICE_URL"
ENV_TIMEOUT = "CVCOACH_TIMEOUT"

MEDIA_TEXT = "text/plain"
MEDIA_PDF = "application/pdf"


@dataclass
class ServiceConfig:
    """Analysis service connection settings."""
    base_url: str = DEFAULT_SERVICE_URL

    # Total request timeout in seconds. Optimization and question generation
    # run a full LLM pass server-side, so keep this generous.
    timeout: float = 60.0
    connect_timeout: float = 10.0

    # Sent when nobody is signed in
    anonymous_user_id: str = "anonymous"


@dataclass
class ExtractionConfig:
    """Limits and engine order for turning uploads into text."""
    max_upload_bytes: int = 5 * 1024 * 1024  # 5 MiB
    max_text_chars: int = 50_000             # applies to résumé and JD text
    min_pdf_chars: int = 50                  # below this the PDF is treated as scanned

    # Tried in order; the first importable engine that parses the file wins
    pdf_engines: list[str] = field(default_factory=lambda: [
        "pdfplumber",
        "pypdf",
    ])

    accepted_media_kinds: list[str] = field(default_factory=lambda: [
        MEDIA_TEXT,
        MEDIA_PDF,
    ])


@dataclass
class WorkflowConfig:
    """
    Orchestrator behaviour.

    ``strict_response_shapes`` decides what happens when the service returns
    success but leaves out fields of the result (e.g. no ``analysis`` block):

    - False (default): the stage commits and missing parts render as empty.
    - True: the stage fails with MalformedResponse and nothing is committed.
    """
    strict_response_shapes: bool = False
    export_dir: Path = field(default_factory=lambda: Path("."))


@dataclass
class SessionConfig:
    """Local sign-in persistence."""
    # None keeps the signed-in user in memory only
    session_file: Path | None = None


@dataclass
class Config:
    """Master configuration combining all settings."""
    service: ServiceConfig = field(default_factory=ServiceConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    workflow: WorkflowConfig = field(default_factory=WorkflowConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """
        Apply environment overrides on top of ``base`` (or the defaults).

        Raises:
            ValueError: If CVCOACH_TIMEOUT is not a number.
        """
        config = base or cls()

        url = os.environ.get(ENV_SERVICE_URL)
        if url:
            config.service.base_url = url

        timeout = os.environ.get(ENV_TIMEOUT)
        if timeout:
            try:
                config.service.timeout = float(timeout)
            except ValueError:
                raise ValueError(f"{ENV_TIMEOUT} must be a number of seconds, got {timeout!r}")

        return config


# ════════════════════════════════════════════════════════════════════════════
# YAML PROFILE LOADER
# ════════════════════════════════════════════════════════════════════════════


def load_config_yaml(yaml_path: str | Path) -> Config:
    """
    Load a YAML profile and return a Config with those values applied.

    Only sections present in the file are overridden; everything else keeps
    its default.  Example profile::

        service:
          base_url: http://localhost:5678/webhook
          timeout: 30
        extraction:
          min_pdf_chars: 80
        workflow:
          strict_response_shapes: true
          export_dir: exports

    Args:
        yaml_path: Path to a YAML profile.

    Returns:
        A Config instance.

    Raises:
        FileNotFoundError: If the YAML file doesn't exist.
        ValueError: If the YAML is empty or not a mapping.
    """
    import yaml

    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"Config profile not found: {yaml_path}")

    with open(yaml_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data or not isinstance(data, dict):
        raise ValueError(f"Empty or invalid YAML: {yaml_path}")

    config = Config()

    # ── Service ──
    svc = data.get("service", {})
    if svc:
        config.service = ServiceConfig(
            base_url=str(svc.get("base_url", config.service.base_url)).rstrip("/"),
            timeout=float(svc.get("timeout", config.service.timeout)),
            connect_timeout=float(svc.get("connect_timeout", config.service.connect_timeout)),
            anonymous_user_id=svc.get("anonymous_user_id", config.service.anonymous_user_id),
        )

    # ── Extraction ──
    ext = data.get("extraction", {})
    if ext:
        config.extraction = ExtractionConfig(
            max_upload_bytes=int(ext.get("max_upload_bytes", config.extraction.max_upload_bytes)),
            max_text_chars=int(ext.get("max_text_chars", config.extraction.max_text_chars)),
            min_pdf_chars=int(ext.get("min_pdf_chars", config.extraction.min_pdf_chars)),
            pdf_engines=ext.get("pdf_engines", config.extraction.pdf_engines),
        )

    # ── Workflow ──
    wf = data.get("workflow", {})
    if wf:
        config.workflow = WorkflowConfig(
            strict_response_shapes=bool(
                wf.get("strict_response_shapes", config.workflow.strict_response_shapes)
            ),
            export_dir=Path(wf.get("export_dir", config.workflow.export_dir)),
        )

    # ── Session ──
    sess = data.get("session", {})
    if sess and sess.get("session_file"):
        config.session = SessionConfig(session_file=Path(sess["session_file"]))

    return config
