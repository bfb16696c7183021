"""Trigger instances of workflows."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.models.setting import SETTINGS_TYPE_TRIGGER
from lifecycle.models.trigger import TriggerInstance
from lifecycle.services.settings_service import SettingsService
from lifecycle.subplugins.registry import get_trigger_lib

logger = logging.getLogger(__name__)


class TriggerService:
    """Creates, copies and removes the trigger instances of workflows."""

    def __init__(self, session: AsyncSession, settings: SettingsService | None = None) -> None:
        """Initialize service.

        Args:
            session: Database session.
            settings: Settings service; one is created on the session if omitted.
        """
        self.session = session
        self.settings = settings or SettingsService(session)

    async def get_trigger(self, trigger_id: int) -> TriggerInstance | None:
        """Get trigger instance by ID."""
        return await self.session.get(TriggerInstance, trigger_id)

    async def get_triggers_for_workflow(self, workflow_id: int) -> list[TriggerInstance]:
        """List the triggers of a workflow in their configured order."""
        stmt = (
            select(TriggerInstance)
            .where(TriggerInstance.workflow_id == workflow_id)
            .order_by(TriggerInstance.sortindex.asc(), TriggerInstance.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def insert_or_update(self, trigger: TriggerInstance) -> TriggerInstance:
        """Persist a trigger instance.

        New instances are placed after the existing triggers of their workflow.

        Raises:
            UnknownSubpluginError: If the trigger's subplugin is not registered.
        """
        get_trigger_lib(trigger.subpluginname)
        if trigger.id is None:
            stmt = select(func.count(TriggerInstance.id)).where(
                TriggerInstance.workflow_id == trigger.workflow_id
            )
            result = await self.session.execute(stmt)
            trigger.sortindex = (result.scalar() or 0) + 1
            self.session.add(trigger)
        else:
            trigger = await self.session.merge(trigger)
        await self.session.flush()
        return trigger

    async def count_instances(self, subpluginname: str) -> int:
        """Count the instances of a trigger subplugin across all workflows."""
        stmt = select(func.count(TriggerInstance.id)).where(
            TriggerInstance.subpluginname == subpluginname
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    def is_manual_trigger(self, subpluginname: str) -> bool:
        """Whether the named trigger is invoked by users instead of a schedule."""
        return get_trigger_lib(subpluginname).is_manual_trigger()

    def has_multiple_instances(self, subpluginname: str) -> bool:
        """Whether the named trigger may be instantiated in several workflows."""
        return get_trigger_lib(subpluginname).has_multiple_instances()

    async def duplicate_triggers(self, src_workflow_id: int, dst_workflow_id: int) -> list[TriggerInstance]:
        """Copy all triggers of one workflow, including their settings, to another."""
        copies = []
        for trigger in await self.get_triggers_for_workflow(src_workflow_id):
            settings = await self.settings.get_settings(trigger.id, SETTINGS_TYPE_TRIGGER)
            copy = TriggerInstance(
                workflow_id=dst_workflow_id,
                subpluginname=trigger.subpluginname,
                instancename=trigger.instancename,
                sortindex=trigger.sortindex,
            )
            self.session.add(copy)
            await self.session.flush()
            await self.settings.save_settings(
                copy.id, SETTINGS_TYPE_TRIGGER, copy.subpluginname, settings
            )
            copies.append(copy)
        logger.debug(
            "Copied %d trigger(s) from workflow %s to %s",
            len(copies), src_workflow_id, dst_workflow_id,
        )
        return copies

    async def remove_instances_of_workflow(self, workflow_id: int) -> int:
        """Delete all triggers of a workflow together with their settings.

        Returns:
            Number of removed trigger instances.
        """
        triggers = await self.get_triggers_for_workflow(workflow_id)
        for trigger in triggers:
            await self.settings.remove_settings(trigger.id, SETTINGS_TYPE_TRIGGER)
        stmt = delete(TriggerInstance).where(TriggerInstance.workflow_id == workflow_id)
        await self.session.execute(stmt)
        return len(triggers)
