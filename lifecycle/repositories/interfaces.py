"""Repository interfaces."""
from abc import ABC, abstractmethod
from typing import List, Optional
from lifecycle.models.trigger import TriggerInstance
from lifecycle.models.workflow import Workflow


class IWorkflowRepository(ABC):
    """Workflow repository interface."""

    @abstractmethod
    async def create(
        self,
        workflow: Workflow,
    ) -> Workflow:
        """Create workflow."""
        pass

    @abstractmethod
    async def get_by_id(
        self,
        workflow_id: int,
    ) -> Optional[Workflow]:
        """Get workflow by ID."""
        pass

    @abstractmethod
    async def list_all(self) -> List[Workflow]:
        """List all workflows."""
        pass

    @abstractmethod
    async def list_active(
        self,
        manual: Optional[bool] = None,
    ) -> List[Workflow]:
        """List active workflows by sortindex."""
        pass

    @abstractmethod
    async def list_active_manual_triggers(self) -> List[TriggerInstance]:
        """List triggers of active manual workflows."""
        pass

    @abstractmethod
    async def update(
        self,
        workflow: Workflow,
    ) -> Workflow:
        """Update workflow."""
        pass

    @abstractmethod
    async def delete(
        self,
        workflow_id: int,
    ) -> bool:
        """Delete workflow."""
        pass
