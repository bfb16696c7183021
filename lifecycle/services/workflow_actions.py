"""Administrative actions on workflows.

Maps the action names used by the administration surface to manager
operations. Destructive actions only run once they are confirmed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from lifecycle.core.notifications import NotificationLevel
from lifecycle.errors import WorkflowValidationError
from lifecycle.models.workflow import Workflow
from lifecycle.services.workflow_manager import AbortResult, WorkflowManager
from lifecycle.strings import get_string

logger = logging.getLogger(__name__)


class WorkflowAction(str, Enum):
    """Actions an administrator can take on a workflow."""

    ACTIVATE = "activate"
    UP = "up"
    DOWN = "down"
    DUPLICATE = "duplicate"
    DISABLE = "disable"
    ABORTDISABLE = "abortdisable"
    ABORT = "abort"
    DELETE = "delete"


CONFIRMATION_REQUIRED = {
    WorkflowAction.DISABLE: "disable_workflow_confirm",
    WorkflowAction.ABORTDISABLE: "abortdisable_workflow_confirm",
    WorkflowAction.ABORT: "abort_workflow_confirm",
    WorkflowAction.DELETE: "delete_workflow_confirm",
}


@dataclass
class ActionResult:
    """Outcome of an action.

    ``workflow`` is the duplicate for ``duplicate`` and the affected
    workflow otherwise; it is None after a deletion.
    """

    action: WorkflowAction
    workflow_id: int
    performed: bool = False
    confirmation_required: bool = False
    message: str | None = None
    workflow: Workflow | None = None
    abort: AbortResult | None = None


async def handle_action(
    manager: WorkflowManager,
    action: WorkflowAction | str,
    workflow_id: int,
    confirm: bool = False,
) -> ActionResult:
    """Run an administrative action on a workflow.

    Args:
        manager: Workflow manager; its notifier receives user-facing messages.
        action: Action to run.
        workflow_id: Workflow ID.
        confirm: Whether the user confirmed a destructive action.

    Returns:
        What happened.

    Raises:
        ValueError: If the action is unknown.
        WorkflowNotFoundError: If the workflow doesn't exist, except for
            ``delete``, which only warns.
    """
    action = WorkflowAction(action)
    result = ActionResult(action=action, workflow_id=workflow_id)

    if action in CONFIRMATION_REQUIRED and not confirm:
        result.confirmation_required = True
        result.message = get_string(CONFIRMATION_REQUIRED[action])
        return result

    if action is WorkflowAction.ACTIVATE:
        try:
            result.workflow = await manager.activate_workflow(workflow_id)
        except WorkflowValidationError as exc:
            # The manager has notified the user already.
            result.message = exc.message
            return result
        result.performed = True
        result.message = get_string("workflow_activated", title=result.workflow.title)

    elif action in (WorkflowAction.UP, WorkflowAction.DOWN):
        result.performed = await manager.change_sortindex(
            workflow_id, up=action is WorkflowAction.UP
        )
        result.workflow = await manager.get_workflow(workflow_id)

    elif action is WorkflowAction.DUPLICATE:
        result.workflow = await manager.duplicate_workflow(workflow_id)
        result.performed = True
        result.message = get_string("workflow_duplicated", title=result.workflow.title)

    elif action in (WorkflowAction.DISABLE, WorkflowAction.ABORTDISABLE):
        result.performed = await manager.disable(workflow_id)
        result.workflow = await manager.get_workflow(workflow_id)
        if result.performed:
            result.message = get_string("workflow_disabled", title=result.workflow.title)
        elif await manager.is_deactivated(workflow_id):
            _warn(manager, result, "workflow_already_disabled")
        elif not await manager.is_disableable(workflow_id):
            _warn(manager, result, "workflow_not_disableable")
        if action is WorkflowAction.ABORTDISABLE:
            result.abort = await manager.abort_processes(workflow_id)
            _report_abort(manager, result.abort)

    elif action is WorkflowAction.ABORT:
        result.abort = await manager.abort_processes(workflow_id)
        result.performed = True
        _report_abort(manager, result.abort)
        result.workflow = await manager.get_workflow(workflow_id)

    elif action is WorkflowAction.DELETE:
        # The workflow may be gone already if the request is repeated.
        workflow = await manager.get_workflow(workflow_id)
        if workflow is None or not await manager.is_removable(workflow_id):
            _warn(manager, result, "workflow_not_removeable")
            return result
        result.performed = await manager.remove(workflow_id)
        result.message = get_string("workflow_removed", title=workflow.title)

    logger.debug("Action %s on workflow %s performed=%s", action.value, workflow_id, result.performed)
    return result


def _warn(manager: WorkflowManager, result: ActionResult, identifier: str) -> None:
    result.message = get_string(identifier)
    manager.notifier.notify(result.message, NotificationLevel.WARNING)


def _report_abort(manager: WorkflowManager, abort: AbortResult) -> None:
    if abort.aborted:
        manager.notifier.notify(
            get_string("processes_aborted", count=len(abort.aborted)),
            NotificationLevel.SUCCESS,
        )
    if abort.failed:
        manager.notifier.notify(
            get_string("processes_abort_failed", count=len(abort.failed)),
            NotificationLevel.ERROR,
        )
