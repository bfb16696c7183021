"""Lifecycle exception hierarchy.

All exceptions inherit from LifecycleError for easy catching.
"""

from __future__ import annotations


class LifecycleError(Exception):
    """Base exception for all lifecycle errors."""

    code = "LIFECYCLE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# Workflow Errors
class WorkflowNotFoundError(LifecycleError):
    """Workflow does not exist."""

    code = "WORKFLOW_NOT_FOUND"

    def __init__(self, workflow_id: int) -> None:
        super().__init__(f"Workflow '{workflow_id}' not found")
        self.workflow_id = workflow_id


class WorkflowValidationError(LifecycleError):
    """Workflow definition is incomplete, e.g. no trigger is bound."""

    code = "WORKFLOW_INVALID"

    def __init__(self, workflow_id: int, message: str) -> None:
        super().__init__(message)
        self.workflow_id = workflow_id


class WorkflowNotEditableError(LifecycleError):
    """Workflow was activated or deactivated and can no longer be edited."""

    code = "WORKFLOW_NOT_EDITABLE"

    def __init__(self, workflow_id: int) -> None:
        super().__init__(
            f"Workflow '{workflow_id}' was already activated and can no longer be edited"
        )
        self.workflow_id = workflow_id


# Subplugin Errors
class UnknownSubpluginError(LifecycleError):
    """No trigger or step subplugin is registered under the given name."""

    code = "UNKNOWN_SUBPLUGIN"

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"Unknown {kind} subplugin '{name}'")
        self.kind = kind
        self.name = name


# Message Errors
class MissingStringError(LifecycleError):
    """Message identifier is unknown or its placeholders cannot be filled."""

    code = "MISSING_STRING"

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Message '{identifier}' is not available")
        self.identifier = identifier
