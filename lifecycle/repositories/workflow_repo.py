"""Workflow repository implementation."""
from typing import List, Optional
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from lifecycle.models.trigger import TriggerInstance
from lifecycle.models.workflow import Workflow
from lifecycle.repositories.interfaces import IWorkflowRepository


class WorkflowRepository(IWorkflowRepository):
    """Workflow repository."""

    def __init__(self, session: AsyncSession):
        """Initialize repository.

        Args:
            session: Database session
        """
        self.session = session

    async def create(
        self,
        workflow: Workflow,
    ) -> Workflow:
        """Create workflow.

        Args:
            workflow: Workflow entity without ID

        Returns:
            Created workflow with its ID assigned
        """
        self.session.add(workflow)
        await self.session.flush()
        return workflow

    async def get_by_id(
        self,
        workflow_id: int,
    ) -> Optional[Workflow]:
        """Get workflow by ID.

        Args:
            workflow_id: Workflow ID

        Returns:
            Workflow or None
        """
        stmt = select(Workflow).where(
            Workflow.id == workflow_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Workflow]:
        """List all workflows.

        Returns:
            Active workflows by sortindex first, then the others by ID
        """
        stmt = select(Workflow).order_by(
            Workflow.active.desc(),
            Workflow.sortindex.is_(None),
            Workflow.sortindex.asc(),
            Workflow.id.asc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active(
        self,
        manual: Optional[bool] = None,
    ) -> List[Workflow]:
        """List active workflows ordered by sortindex.

        Args:
            manual: Only manual (True) or automatic (False) workflows;
                all active workflows if None

        Returns:
            List of workflows
        """
        stmt = select(Workflow).where(Workflow.active == True)  # noqa: E712
        if manual is not None:
            stmt = stmt.where(Workflow.manual == manual)
        stmt = stmt.order_by(Workflow.sortindex.asc(), Workflow.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_manual_triggers(self) -> List[TriggerInstance]:
        """List triggers of active manual workflows.

        Returns:
            List of trigger instances
        """
        stmt = (
            select(TriggerInstance)
            .join(Workflow, TriggerInstance.workflow_id == Workflow.id)
            .where(
                Workflow.active == True,  # noqa: E712
                Workflow.manual == True,  # noqa: E712
            )
            .order_by(Workflow.id.asc(), TriggerInstance.sortindex.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(
        self,
        workflow: Workflow,
    ) -> Workflow:
        """Update workflow.

        Args:
            workflow: Workflow entity

        Returns:
            Updated workflow
        """
        merged = await self.session.merge(workflow)
        await self.session.flush()
        return merged

    async def delete(
        self,
        workflow_id: int,
    ) -> bool:
        """Delete workflow.

        Args:
            workflow_id: Workflow ID

        Returns:
            True if deleted
        """
        stmt = delete(Workflow).where(
            Workflow.id == workflow_id
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
