"""User-facing message catalogue."""

from __future__ import annotations

from typing import Any

from lifecycle.errors import MissingStringError

STRINGS: dict[str, str] = {
    "invalid_workflow_cannot_be_activated": (
        "The workflow definition is invalid, thus it cannot be activated."
    ),
    "workflow_not_removeable": (
        "It is not possible to remove this workflow, since it still has running "
        "processes or its trigger does not allow it. Please abort the processes first."
    ),
    "workflow_not_disableable": (
        "This workflow cannot be disabled, since its trigger allows only a single instance."
    ),
    "workflow_already_disabled": "This workflow has been disabled already.",
    "workflow_duplicate_title": "{title} (copy)",
    "workflow_activated": "Workflow '{title}' was activated.",
    "workflow_disabled": "Workflow '{title}' was disabled.",
    "workflow_duplicated": "Workflow '{title}' was duplicated.",
    "workflow_removed": "Workflow '{title}' was deleted.",
    "processes_aborted": "{count} process(es) were aborted.",
    "processes_abort_failed": "{count} process(es) could not be aborted.",
    "disable_workflow_confirm": (
        "The workflow is going to be disabled. Running processes will continue. "
        "Are you sure?"
    ),
    "abortdisable_workflow_confirm": (
        "The workflow is going to be disabled and all its running processes aborted. "
        "Are you sure?"
    ),
    "abort_workflow_confirm": (
        "All running processes of the workflow are going to be aborted. Are you sure?"
    ),
    "delete_workflow_confirm": (
        "The workflow is going to be deleted together with its triggers and steps. "
        "This cannot be undone. Are you sure?"
    ),
}


def get_string(identifier: str, **params: Any) -> str:
    """Return the message for an identifier with placeholders filled in.

    Raises:
        MissingStringError: If the identifier is unknown or a placeholder
            has no value.
    """
    try:
        template = STRINGS[identifier]
    except KeyError:
        raise MissingStringError(identifier) from None
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        raise MissingStringError(identifier) from None
