"""Repository layer."""
from lifecycle.repositories.interfaces import IWorkflowRepository
from lifecycle.repositories.workflow_repo import WorkflowRepository

__all__ = [
    "IWorkflowRepository",
    "WorkflowRepository",
]
