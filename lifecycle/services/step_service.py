"""Step instances of workflows."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.models.setting import SETTINGS_TYPE_STEP
from lifecycle.models.step import StepInstance
from lifecycle.services.settings_service import SettingsService
from lifecycle.subplugins.registry import get_step_lib

logger = logging.getLogger(__name__)


class StepService:
    """Creates, copies and removes the step instances of workflows."""

    def __init__(self, session: AsyncSession, settings: SettingsService | None = None) -> None:
        self.session = session
        self.settings = settings or SettingsService(session)

    async def get_step_instance(self, step_id: int) -> StepInstance | None:
        return await self.session.get(StepInstance, step_id)

    async def get_steps_for_workflow(self, workflow_id: int) -> list[StepInstance]:
        """List the steps of a workflow in execution order."""
        stmt = (
            select(StepInstance)
            .where(StepInstance.workflow_id == workflow_id)
            .order_by(StepInstance.sortindex.asc(), StepInstance.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_step_instance_by_workflow_index(self, workflow_id: int, index: int) -> StepInstance | None:
        """Return the step at 1-based position ``index`` of a workflow."""
        stmt = select(StepInstance).where(
            StepInstance.workflow_id == workflow_id,
            StepInstance.sortindex == index,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_steps_of_workflow(self, workflow_id: int) -> int:
        stmt = select(func.count(StepInstance.id)).where(StepInstance.workflow_id == workflow_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def insert_or_update(self, step: StepInstance) -> StepInstance:
        """Persist a step instance; new steps are appended to the workflow.

        Raises:
            UnknownSubpluginError: If the step's subplugin is not registered.
        """
        get_step_lib(step.subpluginname)
        if step.id is None:
            step.sortindex = await self.count_steps_of_workflow(step.workflow_id) + 1
            self.session.add(step)
        else:
            step = await self.session.merge(step)
        await self.session.flush()
        return step

    async def duplicate_steps(self, src_workflow_id: int, dst_workflow_id: int) -> list[StepInstance]:
        """Copy all steps of one workflow, including their settings, to another."""
        copies = []
        for step in await self.get_steps_for_workflow(src_workflow_id):
            settings = await self.settings.get_settings(step.id, SETTINGS_TYPE_STEP)
            copy = StepInstance(
                workflow_id=dst_workflow_id,
                subpluginname=step.subpluginname,
                instancename=step.instancename,
                sortindex=step.sortindex,
            )
            self.session.add(copy)
            await self.session.flush()
            await self.settings.save_settings(copy.id, SETTINGS_TYPE_STEP, copy.subpluginname, settings)
            copies.append(copy)
        logger.debug(
            "Copied %d step(s) from workflow %s to %s",
            len(copies), src_workflow_id, dst_workflow_id,
        )
        return copies

    async def remove_instances_of_workflow(self, workflow_id: int) -> int:
        """Delete all steps of a workflow together with their settings."""
        steps = await self.get_steps_for_workflow(workflow_id)
        for step in steps:
            await self.settings.remove_settings(step.id, SETTINGS_TYPE_STEP)
        stmt = delete(StepInstance).where(StepInstance.workflow_id == workflow_id)
        await self.session.execute(stmt)
        return len(steps)
