"""Workflow: the stage state machine and optimized-CV export."""

from .export import export_filename, write_optimized_resume
from .orchestrator import WorkflowOrchestrator

__all__ = [
    "WorkflowOrchestrator",
    "export_filename",
    "write_optimized_resume",
]
