"""Analysis pipeline and review workflow."""

from .orchestrator import run_analysis
from .workflow import ReviewWorkflow, WorkflowContext

__all__ = ["run_analysis", "ReviewWorkflow", "WorkflowContext"]
