"""Data transfer objects of the HTTP API."""
from lifecycle.dtos.workflow import (
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

__all__ = [
    "ActionResponse",
    "ManualTriggerToolResponse",
    "NotificationResponse",
    "SubpluginInstanceCreate",
    "SubpluginInstanceResponse",
    "WorkflowCreate",
    "WorkflowListResponse",
    "WorkflowResponse",
    "WorkflowUpdate",
]
