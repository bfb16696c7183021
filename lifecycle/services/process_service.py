"""Processes of workflows running against courses."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.models.process import Process
from lifecycle.services.step_service import StepService
from lifecycle.subplugins.registry import get_step_lib

logger = logging.getLogger(__name__)


class ProcessService:
    """Creates, lists and rolls back processes."""

    def __init__(self, session: AsyncSession, steps: StepService | None = None) -> None:
        """Initialize service.

        Args:
            session: Database session.
            steps: Step service; one is created on the session if omitted.
        """
        self.session = session
        self.steps = steps or StepService(session)

    async def create_process(self, course_id: int, workflow_id: int) -> Process:
        """Start a process of a workflow for a course.

        Args:
            course_id: Course entering the workflow.
            workflow_id: Workflow to run.

        Returns:
            Created process, positioned before the first step.
        """
        process = Process(
            course_id=course_id,
            workflow_id=workflow_id,
            stepindex=0,
            waiting=False,
            timestepchanged=datetime.now(UTC).replace(tzinfo=None),
        )
        self.session.add(process)
        await self.session.flush()
        return process

    async def get_process(self, process_id: int) -> Process | None:
        return await self.session.get(Process, process_id)

    async def get_processes_by_workflow(self, workflow_id: int) -> list[Process]:
        """List all processes of a workflow."""
        stmt = (
            select(Process)
            .where(Process.workflow_id == workflow_id)
            .order_by(Process.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_processes_by_workflow(self, workflow_id: int) -> int:
        """Count the processes of a workflow."""
        stmt = select(func.count(Process.id)).where(Process.workflow_id == workflow_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def rollback_process(self, process: Process) -> None:
        """Abort a process and undo its steps.

        Steps are rolled back from the current one down to the first,
        then the process is deleted.

        Args:
            process: Process to roll back.
        """
        for index in range(process.stepindex, 0, -1):
            step = await self.steps.get_step_instance_by_workflow_index(process.workflow_id, index)
            if step is None:
                logger.warning(
                    "Workflow %s has no step at index %d; skipping rollback of process %s",
                    process.workflow_id, index, process.id,
                )
                continue
            lib = get_step_lib(step.subpluginname)
            await lib.rollback_course(step.id, process.id, process.course_id)

        await self.session.delete(process)
        await self.session.flush()
        logger.info(
            "Rolled back process %s of workflow %s for course %s",
            process.id, process.workflow_id, process.course_id,
            extra={"workflow_id": process.workflow_id, "process_id": process.id, "course_id": process.course_id},
        )

    async def remove_processes_of_workflow(self, workflow_id: int) -> int:
        """Delete the processes of a workflow without rolling them back.

        Returns:
            Number of deleted processes.
        """
        stmt = delete(Process).where(Process.workflow_id == workflow_id)
        result = await self.session.execute(stmt)
        return result.rowcount
