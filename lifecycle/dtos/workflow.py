"""Workflow Pydantic schemas for API request/response."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class WorkflowCreate(BaseModel):
    """Workflow creation request."""

    title: str = Field(..., min_length=1, max_length=255, description="Workflow title")


class WorkflowUpdate(BaseModel):
    """Workflow update request."""

    title: str = Field(..., min_length=1, max_length=255, description="Workflow title")


class WorkflowResponse(BaseModel):
    """Workflow response with the actions currently allowed on it."""

    id: int
    title: str
    active: bool
    manual: bool | None = None
    sortindex: int | None = None
    timeactive: datetime | None = None
    timedeactive: datetime | None = None
    editable: bool = Field(..., description="Triggers and steps can still be changed")
    disableable: bool
    abortable: bool = Field(..., description="Processes of the workflow are running")
    removable: bool


class WorkflowListResponse(BaseModel):
    """Workflow list response."""

    workflows: list[WorkflowResponse]
    total: int


class SubpluginInstanceCreate(BaseModel):
    """Request to bind a trigger or step instance to a workflow."""

    subpluginname: str = Field(..., min_length=1, max_length=100, description="Registered subplugin name")
    instancename: str = Field(..., min_length=1, max_length=100, description="Name of the instance")
    settings: dict[str, Any] = Field(default_factory=dict, description="Instance settings")


class SubpluginInstanceResponse(BaseModel):
    """Trigger or step instance response."""

    id: int
    workflow_id: int
    subpluginname: str
    instancename: str
    sortindex: int
    settings: dict[str, str | None] = Field(default_factory=dict)


class ManualTriggerToolResponse(BaseModel):
    """Tool of an active manual workflow."""

    trigger_id: int
    icon: str | None = None
    displayname: str | None = None
    capability: str | None = None


class NotificationResponse(BaseModel):
    """User notification."""

    message: str
    level: str


class ActionResponse(BaseModel):
    """Result of an administrative action."""

    action: str
    workflow_id: int
    performed: bool
    confirmation_required: bool = False
    message: str | None = None
    workflow: WorkflowResponse | None = None
    aborted_processes: list[int] = Field(default_factory=list)
    failed_processes: list[int] = Field(default_factory=list)
    notifications: list[NotificationResponse] = Field(default_factory=list)
