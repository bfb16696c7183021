"""Workflow lifecycle manager.

Decides which state transitions a workflow may undergo and keeps the
ranking of active automatic workflows dense:

- A workflow is editable until it is activated or deactivated.
- Activation happens once; the bound trigger decides whether the
  workflow is manual or automatic. Automatic workflows are ranked last.
- Deactivation is final. It frees the workflow's rank and closes the gap.
- Removal deletes triggers, steps and their settings along with the
  workflow, but only while no process of the workflow is running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Mapping, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.core.notifications import LoggingNotifier, NotificationLevel, Notifier
from lifecycle.core.ranking import SortRanking
from lifecycle.db.database import transaction
from lifecycle.errors import (
    MissingStringError,
    WorkflowNotEditableError,
    WorkflowNotFoundError,
    WorkflowValidationError,
)
from lifecycle.models.process import Process
from lifecycle.models.setting import SETTINGS_TYPE_STEP, SETTINGS_TYPE_TRIGGER
from lifecycle.models.step import StepInstance
from lifecycle.models.trigger import TriggerInstance
from lifecycle.models.workflow import Workflow
from lifecycle.repositories.interfaces import IWorkflowRepository
from lifecycle.repositories.workflow_repo import WorkflowRepository
from lifecycle.services.process_service import ProcessService
from lifecycle.services.settings_service import SettingsService
from lifecycle.services.step_service import StepService
from lifecycle.services.trigger_service import TriggerService
from lifecycle.strings import get_string

logger = logging.getLogger(__name__)


class ITriggerService(Protocol):
    """Trigger service interface."""

    async def get_triggers_for_workflow(self, workflow_id: int) -> list[TriggerInstance]:
        ...

    async def insert_or_update(self, trigger: TriggerInstance) -> TriggerInstance:
        ...

    async def count_instances(self, subpluginname: str) -> int:
        ...

    def is_manual_trigger(self, subpluginname: str) -> bool:
        ...

    def has_multiple_instances(self, subpluginname: str) -> bool:
        ...

    async def duplicate_triggers(self, src_workflow_id: int, dst_workflow_id: int) -> Any:
        ...

    async def remove_instances_of_workflow(self, workflow_id: int) -> Any:
        ...


class IStepService(Protocol):
    """Step service interface."""

    async def insert_or_update(self, step: StepInstance) -> StepInstance:
        ...

    async def duplicate_steps(self, src_workflow_id: int, dst_workflow_id: int) -> Any:
        ...

    async def remove_instances_of_workflow(self, workflow_id: int) -> Any:
        ...


class IProcessService(Protocol):
    """Process service interface."""

    async def get_processes_by_workflow(self, workflow_id: int) -> list[Process]:
        ...

    async def count_processes_by_workflow(self, workflow_id: int) -> int:
        ...

    async def rollback_process(self, process: Process) -> None:
        ...

    async def remove_processes_of_workflow(self, workflow_id: int) -> Any:
        ...


class ISettingsService(Protocol):
    """Settings service interface."""

    async def get_settings(self, instance_id: int, settings_type: str) -> dict[str, str | None]:
        ...

    async def save_settings(
        self,
        instance_id: int,
        settings_type: str,
        subpluginname: str,
        data: Mapping[str, Any],
    ) -> None:
        ...


@dataclass(frozen=True)
class ManualTriggerTool:
    """Tool offered to users for putting a course into a manual workflow.

    Whether a user may use it has to be checked against ``capability``
    before it is displayed.
    """

    trigger_id: int
    icon: str | None
    displayname: str | None
    capability: str | None


@dataclass
class AbortResult:
    """Outcome of aborting the processes of a workflow."""

    workflow_id: int
    aborted: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class WorkflowManager:
    """Manages activation, ordering, duplication and removal of workflows.

    Example:
        >>> manager = create_workflow_manager(session)
        >>> workflow = await manager.create_workflow("Delete old courses")
        >>> await manager.activate_workflow(workflow.id)
    """

    def __init__(
        self,
        session: AsyncSession,
        triggers: ITriggerService,
        steps: IStepService,
        processes: IProcessService,
        settings: ISettingsService,
        notifier: Notifier | None = None,
        repository: IWorkflowRepository | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            session: Database session all collaborators work on.
            triggers: Trigger service.
            steps: Step service.
            processes: Process service.
            settings: Settings service.
            notifier: Receives user-facing warnings; logs them if omitted.
            repository: Workflow repository; SQLAlchemy-backed if omitted.
        """
        self.session = session
        self.triggers = triggers
        self.steps = steps
        self.processes = processes
        self.settings = settings
        self.notifier = notifier or LoggingNotifier()
        self.repository = repository or WorkflowRepository(session)

    # Persistence

    async def insert_or_update(self, workflow: Workflow) -> Workflow:
        """Persist a workflow, inserting it if it has no ID yet."""
        async with transaction(self.session):
            if workflow.id is None:
                workflow = await self.repository.create(workflow)
            else:
                workflow = await self.repository.update(workflow)
        return workflow

    async def create_workflow(self, title: str) -> Workflow:
        """Create a workflow that only has a title.

        Args:
            title: Title of the workflow.

        Returns:
            The persisted workflow.
        """
        workflow = await self.insert_or_update(Workflow(title=title, active=False))
        logger.info("Created workflow %s '%s'", workflow.id, workflow.title)
        return workflow

    async def get_workflow(self, workflow_id: int) -> Workflow | None:
        return await self.repository.get_by_id(workflow_id)

    async def get_workflows(self) -> list[Workflow]:
        """All workflows, active ones first in ranking order."""
        return await self.repository.list_all()

    async def get_active_workflows(self) -> list[Workflow]:
        return await self.repository.list_active()

    async def get_active_automatic_workflows(self) -> list[Workflow]:
        return await self.repository.list_active(manual=False)

    async def get_active_manual_workflow_triggers(self) -> list[TriggerInstance]:
        return await self.repository.list_active_manual_triggers()

    async def get_manual_trigger_tools_for_active_workflows(self) -> list[ManualTriggerTool]:
        """Return the tools of all active manual workflows."""
        tools = []
        for trigger in await self.get_active_manual_workflow_triggers():
            settings = await self.settings.get_settings(trigger.id, SETTINGS_TYPE_TRIGGER)
            tools.append(ManualTriggerTool(
                trigger_id=trigger.id,
                icon=settings.get("icon"),
                displayname=settings.get("displayname"),
                capability=settings.get("capability"),
            ))
        return tools

    # Editing

    async def rename(self, workflow_id: int, title: str) -> Workflow:
        """Change the title of an editable workflow.

        Raises:
            WorkflowNotEditableError: If the workflow was ever activated.
        """
        async with transaction(self.session):
            workflow = await self._require_editable(workflow_id)
            workflow.title = title
            return await self.insert_or_update(workflow)

    async def add_trigger(
        self,
        workflow_id: int,
        subpluginname: str,
        instancename: str,
        settings: Mapping[str, Any] | None = None,
    ) -> TriggerInstance:
        """Bind a trigger instance to an editable workflow.

        Raises:
            WorkflowNotEditableError: If the workflow was ever activated.
            WorkflowValidationError: If the trigger allows only a single
                instance and one exists already.
            UnknownSubpluginError: If the trigger is not registered.
        """
        async with transaction(self.session):
            await self._require_editable(workflow_id)
            if (
                not self.triggers.has_multiple_instances(subpluginname)
                and await self.triggers.count_instances(subpluginname) > 0
            ):
                raise WorkflowValidationError(
                    workflow_id,
                    f"Trigger '{subpluginname}' allows only a single instance",
                )
            trigger = await self.triggers.insert_or_update(TriggerInstance(
                workflow_id=workflow_id,
                subpluginname=subpluginname,
                instancename=instancename,
            ))
            await self.settings.save_settings(
                trigger.id, SETTINGS_TYPE_TRIGGER, subpluginname, settings or {}
            )
        return trigger

    async def add_step(
        self,
        workflow_id: int,
        subpluginname: str,
        instancename: str,
        settings: Mapping[str, Any] | None = None,
    ) -> StepInstance:
        """Append a step instance to an editable workflow.

        Raises:
            WorkflowNotEditableError: If the workflow was ever activated.
            UnknownSubpluginError: If the step is not registered.
        """
        async with transaction(self.session):
            await self._require_editable(workflow_id)
            step = await self.steps.insert_or_update(StepInstance(
                workflow_id=workflow_id,
                subpluginname=subpluginname,
                instancename=instancename,
            ))
            await self.settings.save_settings(
                step.id, SETTINGS_TYPE_STEP, subpluginname, settings or {}
            )
        return step

    # State transitions

    async def activate_workflow(self, workflow_id: int) -> Workflow:
        """Activate a workflow.

        Activating an active or deactivated workflow changes nothing.

        Args:
            workflow_id: Workflow ID.

        Returns:
            The workflow.

        Raises:
            WorkflowNotFoundError: If the workflow doesn't exist.
            WorkflowValidationError: If no trigger is bound to the workflow.
        """
        async with transaction(self.session):
            workflow = await self._require(workflow_id)
            triggers = await self.triggers.get_triggers_for_workflow(workflow_id)
            if not triggers:
                message = get_string("invalid_workflow_cannot_be_activated")
                self.notifier.notify(message, NotificationLevel.WARNING)
                raise WorkflowValidationError(workflow_id, message)

            if workflow.active or workflow.timedeactive is not None:
                logger.debug("Workflow %s is active or deactivated already", workflow_id)
                return workflow

            # Only the first trigger decides between manual and automatic.
            manual = self.triggers.is_manual_trigger(triggers[0].subpluginname)
            # Snapshot the ranking before this workflow counts as active.
            ranking = None if manual else await self._ranking()
            workflow.manual = manual
            workflow.active = True
            workflow.timeactive = _utcnow()
            if ranking is not None:
                ranking.append(workflow)
            await self.repository.update(workflow)

        logger.info(
            "Activated %s workflow %s (sortindex=%s)",
            "manual" if workflow.manual else "automatic", workflow_id, workflow.sortindex,
            extra={"workflow_id": workflow_id, "action": "activate"},
        )
        return workflow

    async def disable(self, workflow_id: int) -> bool:
        """Deactivate a workflow for good.

        Running processes are left alone; see ``abort_processes``. Nothing
        happens if the workflow is not disableable or was deactivated before.

        Returns:
            True if the workflow was deactivated.

        Raises:
            WorkflowNotFoundError: If the workflow doesn't exist.
        """
        async with transaction(self.session):
            workflow = await self._require(workflow_id)
            if workflow.timedeactive is not None:
                logger.debug("Workflow %s is deactivated already", workflow_id)
                return False
            if not await self.is_disableable(workflow_id):
                logger.debug("Workflow %s is not disableable", workflow_id)
                return False

            changed: list[Any] = []
            if workflow.active and not workflow.manual:
                ranking = await self._ranking()
                if workflow in ranking:
                    changed = ranking.remove(workflow)
            workflow.active = False
            workflow.sortindex = None
            workflow.timedeactive = _utcnow()
            await self.repository.update(workflow)
            for other in changed:
                if other.id != workflow.id:
                    await self.repository.update(other)

        logger.info(
            "Disabled workflow %s", workflow_id,
            extra={"workflow_id": workflow_id, "action": "disable"},
        )
        return True

    async def abort_processes(self, workflow_id: int) -> AbortResult:
        """Roll back every process of a workflow.

        Each process is rolled back within its own savepoint; a failing
        rollback is undone, logged and recorded, and the remaining processes
        are still attempted.

        Raises:
            WorkflowNotFoundError: If the workflow doesn't exist.
        """
        result = AbortResult(workflow_id=workflow_id)
        async with transaction(self.session):
            await self._require(workflow_id)
            for process in await self.processes.get_processes_by_workflow(workflow_id):
                process_id = process.id
                try:
                    async with self.session.begin_nested():
                        await self.processes.rollback_process(process)
                except Exception:
                    logger.exception(
                        "Failed to roll back process %s of workflow %s", process_id, workflow_id,
                        extra={"workflow_id": workflow_id, "process_id": process_id},
                    )
                    result.failed.append(process_id)
                else:
                    result.aborted.append(process_id)

        logger.info(
            "Aborted %d process(es) of workflow %s, %d failed",
            len(result.aborted), workflow_id, len(result.failed),
            extra={"workflow_id": workflow_id, "action": "abort"},
        )
        return result

    async def change_sortindex(self, workflow_id: int, up: bool) -> bool:
        """Move an active automatic workflow one rank up or down.

        The workflow swaps ranks with its neighbour. Inactive and manual
        workflows, the first workflow moving up and the last moving down
        stay where they are.

        Returns:
            True if the ranking changed.

        Raises:
            WorkflowNotFoundError: If the workflow doesn't exist.
        """
        async with transaction(self.session):
            workflow = await self._require(workflow_id)
            if not workflow.active or workflow.manual or workflow.sortindex is None:
                return False
            ranking = await self._ranking()
            changed = ranking.swap(workflow, up)
            for entry in changed:
                await self.repository.update(entry)

        if changed:
            logger.info(
                "Moved workflow %s %s to sortindex %s",
                workflow_id, "up" if up else "down", workflow.sortindex,
                extra={"workflow_id": workflow_id, "action": "up" if up else "down"},
            )
        return bool(changed)

    async def duplicate_workflow(self, workflow_id: int) -> Workflow:
        """Copy a workflow with its triggers, steps and their settings.

        The copy starts out inactive and editable.

        Raises:
            WorkflowNotFoundError: If the workflow doesn't exist.
        """
        async with transaction(self.session):
            original = await self._require(workflow_id)
            try:
                title = get_string("workflow_duplicate_title", title=original.title)
            except MissingStringError:
                title = original.title
            copy = await self.create_workflow(title)
            await self.triggers.duplicate_triggers(workflow_id, copy.id)
            await self.steps.duplicate_steps(workflow_id, copy.id)

        logger.info(
            "Duplicated workflow %s as %s", workflow_id, copy.id,
            extra={"workflow_id": workflow_id, "action": "duplicate"},
        )
        return copy

    async def remove(self, workflow_id: int, force: bool = False) -> bool:
        """Delete a workflow with its triggers, steps and settings.

        Args:
            workflow_id: Workflow ID.
            force: Skip the removability check and drop leftover processes.

        Returns:
            True if the workflow was deleted.

        Raises:
            WorkflowNotFoundError: If the workflow doesn't exist.
        """
        async with transaction(self.session):
            workflow = await self._require(workflow_id)
            if not force and not await self.is_removable(workflow_id):
                logger.debug("Workflow %s is not removable", workflow_id)
                return False

            if workflow.active and not workflow.manual:
                ranking = await self._ranking()
                if workflow in ranking:
                    for other in ranking.remove(workflow):
                        if other.id != workflow.id:
                            await self.repository.update(other)
            await self.triggers.remove_instances_of_workflow(workflow_id)
            await self.steps.remove_instances_of_workflow(workflow_id)
            if force:
                await self.processes.remove_processes_of_workflow(workflow_id)
            await self.repository.delete(workflow_id)

        logger.info(
            "Removed workflow %s%s", workflow_id, " (forced)" if force else "",
            extra={"workflow_id": workflow_id, "action": "delete"},
        )
        return True

    # Predicates

    async def is_valid(self, workflow_id: int) -> bool:
        """A workflow is valid once at least one trigger is bound to it."""
        return bool(await self.triggers.get_triggers_for_workflow(workflow_id))

    async def is_active(self, workflow_id: int) -> bool:
        return (await self._require(workflow_id)).active

    async def is_deactivated(self, workflow_id: int) -> bool:
        return (await self._require(workflow_id)).timedeactive is not None

    async def is_disableable(self, workflow_id: int) -> bool:
        """Workflows without a trigger or with a multi-instance trigger can be disabled."""
        triggers = await self.triggers.get_triggers_for_workflow(workflow_id)
        if not triggers:
            return True
        return self.triggers.has_multiple_instances(triggers[0].subpluginname)

    async def is_editable(self, workflow_id: int) -> bool:
        """Only workflows that were never activated can be edited."""
        workflow = await self._require(workflow_id)
        return not workflow.active and workflow.timedeactive is None

    async def is_abortable(self, workflow_id: int) -> bool:
        return await self.processes.count_processes_by_workflow(workflow_id) > 0

    async def is_removable(self, workflow_id: int) -> bool:
        """Disableable workflows without running processes can be removed."""
        if await self.processes.count_processes_by_workflow(workflow_id) > 0:
            return False
        return await self.is_disableable(workflow_id)

    # Helpers

    async def _require(self, workflow_id: int) -> Workflow:
        workflow = await self.repository.get_by_id(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)
        return workflow

    async def _require_editable(self, workflow_id: int) -> Workflow:
        workflow = await self._require(workflow_id)
        if workflow.active or workflow.timedeactive is not None:
            raise WorkflowNotEditableError(workflow_id)
        return workflow

    async def _ranking(self) -> SortRanking:
        return SortRanking(await self.repository.list_active(manual=False))


def create_workflow_manager(
    session: AsyncSession,
    notifier: Notifier | None = None,
) -> WorkflowManager:
    """Build a manager with SQLAlchemy-backed collaborators on one session."""
    settings = SettingsService(session)
    steps = StepService(session, settings)
    return WorkflowManager(
        session,
        triggers=TriggerService(session, settings),
        steps=steps,
        processes=ProcessService(session, steps),
        settings=settings,
        notifier=notifier,
    )
