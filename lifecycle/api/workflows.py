"""Workflows API endpoints.

Administration surface of the workflow manager: list and create
workflows, bind triggers and steps, and run lifecycle actions.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.notifications import CollectingNotifier
from ..db.database import get_db
from ..dtos.workflow import (
    ActionResponse,
    ManualTriggerToolResponse,
    NotificationResponse,
    SubpluginInstanceCreate,
    SubpluginInstanceResponse,
    WorkflowCreate,
    WorkflowListResponse,
    WorkflowResponse,
    WorkflowUpdate,
)
from ..errors import (
    LifecycleError,
    UnknownSubpluginError,
    WorkflowNotEditableError,
    WorkflowNotFoundError,
    WorkflowValidationError,
)
from ..models.setting import SETTINGS_TYPE_STEP, SETTINGS_TYPE_TRIGGER
from ..models.workflow import Workflow
from ..services.workflow_actions import WorkflowAction, handle_action
from ..services.workflow_manager import WorkflowManager, create_workflow_manager

router = APIRouter(prefix="/api/workflows", tags=["workflows"])

ERROR_STATUS_CODES: dict[type[LifecycleError], int] = {
    WorkflowNotFoundError: 404,
    WorkflowNotEditableError: 409,
    WorkflowValidationError: 422,
    UnknownSubpluginError: 422,
}


def get_manager(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowManager:
    """Workflow manager for the current request, collecting notifications."""
    return create_workflow_manager(session, notifier=CollectingNotifier())


def _http_error(exc: LifecycleError) -> HTTPException:
    return HTTPException(
        status_code=ERROR_STATUS_CODES.get(type(exc), 400),
        detail={"error": {"code": exc.code, "message": exc.message}},
    )


async def _to_response(manager: WorkflowManager, model: Workflow) -> WorkflowResponse:
    """Convert SQLAlchemy model to response DTO."""
    return WorkflowResponse(
        id=model.id,
        title=model.title,
        active=model.active,
        manual=model.manual,
        sortindex=model.sortindex,
        timeactive=model.timeactive,
        timedeactive=model.timedeactive,
        editable=await manager.is_editable(model.id),
        disableable=await manager.is_disableable(model.id),
        abortable=await manager.is_abortable(model.id),
        removable=await manager.is_removable(model.id),
    )


def _notifications(manager: WorkflowManager) -> list[NotificationResponse]:
    notifier = manager.notifier
    if not isinstance(notifier, CollectingNotifier):
        return []
    return [
        NotificationResponse(message=n.message, level=n.level.value)
        for n in notifier.notifications
    ]


@router.get("", response_model=WorkflowListResponse)
async def list_workflows(
    manager: Annotated[WorkflowManager, Depends(get_manager)],
    active: bool | None = Query(None, description="Only active (true) or inactive (false) workflows"),
):
    """List workflows, active ones first in ranking order.

    Args:
        manager: Workflow manager.
        active: Optional filter on the active flag.

    Returns:
        List of workflows with the actions allowed on them.
    """
    workflows = await manager.get_workflows()
    if active is not None:
        workflows = [w for w in workflows if w.active == active]
    return WorkflowListResponse(
        workflows=[await _to_response(manager, w) for w in workflows],
        total=len(workflows),
    )


@router.post("", response_model=WorkflowResponse, status_code=201)
async def create_workflow(
    workflow: WorkflowCreate,
    manager: Annotated[WorkflowManager, Depends(get_manager)],
):
    """Create a new, empty workflow."""
    created = await manager.create_workflow(workflow.title)
    return await _to_response(manager, created)


@router.get("/manual-triggers", response_model=list[ManualTriggerToolResponse])
async def list_manual_trigger_tools(
    manager: Annotated[WorkflowManager, Depends(get_manager)],
):
    """List the tools of all active manual workflows.

    Callers have to check each tool's capability before offering it.
    """
    tools = await manager.get_manual_trigger_tools_for_active_workflows()
    return [
        ManualTriggerToolResponse(
            trigger_id=tool.trigger_id,
            icon=tool.icon,
            displayname=tool.displayname,
            capability=tool.capability,
        )
        for tool in tools
    ]


@router.get("/{workflow_id}", response_model=WorkflowResponse)
async def get_workflow(
    workflow_id: int,
    manager: Annotated[WorkflowManager, Depends(get_manager)],
):
    """Get workflow by ID.

    Raises:
        404: Workflow not found.
    """
    model = await manager.get_workflow(workflow_id)
    if model is None:
        raise _http_error(WorkflowNotFoundError(workflow_id))
    return await _to_response(manager, model)


@router.put("/{workflow_id}", response_model=WorkflowResponse)
async def update_workflow(
    workflow_id: int,
    workflow: WorkflowUpdate,
    manager: Annotated[WorkflowManager, Depends(get_manager)],
):
    """Rename a workflow that was never activated.

    Raises:
        404: Workflow not found.
        409: Workflow is no longer editable.
    """
    try:
        model = await manager.rename(workflow_id, workflow.title)
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return await _to_response(manager, model)


@router.post(
    "/{workflow_id}/triggers",
    response_model=SubpluginInstanceResponse,
    status_code=201,
)
async def add_trigger(
    workflow_id: int,
    payload: SubpluginInstanceCreate,
    manager: Annotated[WorkflowManager, Depends(get_manager)],
):
    """Bind a trigger instance to a workflow.

    Raises:
        404: Workflow not found.
        409: Workflow is no longer editable.
        422: Unknown trigger or single-instance trigger in use.
    """
    try:
        trigger = await manager.add_trigger(
            workflow_id, payload.subpluginname, payload.instancename, payload.settings
        )
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return SubpluginInstanceResponse(
        id=trigger.id,
        workflow_id=trigger.workflow_id,
        subpluginname=trigger.subpluginname,
        instancename=trigger.instancename,
        sortindex=trigger.sortindex,
        settings=await manager.settings.get_settings(trigger.id, SETTINGS_TYPE_TRIGGER),
    )


@router.post(
    "/{workflow_id}/steps",
    response_model=SubpluginInstanceResponse,
    status_code=201,
)
async def add_step(
    workflow_id: int,
    payload: SubpluginInstanceCreate,
    manager: Annotated[WorkflowManager, Depends(get_manager)],
):
    """Append a step instance to a workflow.

    Raises:
        404: Workflow not found.
        409: Workflow is no longer editable.
        422: Unknown step.
    """
    try:
        step = await manager.add_step(
            workflow_id, payload.subpluginname, payload.instancename, payload.settings
        )
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return SubpluginInstanceResponse(
        id=step.id,
        workflow_id=step.workflow_id,
        subpluginname=step.subpluginname,
        instancename=step.instancename,
        sortindex=step.sortindex,
        settings=await manager.settings.get_settings(step.id, SETTINGS_TYPE_STEP),
    )


@router.post("/{workflow_id}/actions/{action}", response_model=ActionResponse)
async def run_action(
    workflow_id: int,
    action: WorkflowAction,
    manager: Annotated[WorkflowManager, Depends(get_manager)],
    confirm: bool = Query(False, description="Confirms a destructive action"),
):
    """Run a lifecycle action on a workflow.

    ``disable``, ``abortdisable``, ``abort`` and ``delete`` need
    ``confirm=true``; without it the response asks for confirmation.

    Raises:
        404: Workflow not found.
    """
    try:
        result = await handle_action(manager, action, workflow_id, confirm=confirm)
    except LifecycleError as exc:
        raise _http_error(exc) from exc

    return ActionResponse(
        action=result.action.value,
        workflow_id=result.workflow_id,
        performed=result.performed,
        confirmation_required=result.confirmation_required,
        message=result.message,
        workflow=await _to_response(manager, result.workflow) if result.workflow else None,
        aborted_processes=result.abort.aborted if result.abort else [],
        failed_processes=result.abort.failed if result.abort else [],
        notifications=_notifications(manager),
    )
