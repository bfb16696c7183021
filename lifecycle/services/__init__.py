"""Service layer - business logic between API and persistence."""

from .settings_service import SettingsService
from .trigger_service import TriggerService
from .step_service import StepService
from .process_service import ProcessService
from .workflow_manager import (
    AbortResult,
    ManualTriggerTool,
    WorkflowManager,
    create_workflow_manager,
)
from .workflow_actions import ActionResult, WorkflowAction, handle_action

__all__ = [
    "SettingsService",
    "TriggerService",
    "StepService",
    "ProcessService",
    "AbortResult",
    "ManualTriggerTool",
    "WorkflowManager",
    "create_workflow_manager",
    "ActionResult",
    "WorkflowAction",
    "handle_action",
]
