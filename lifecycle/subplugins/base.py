"""Base classes for trigger and step subplugins."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class TriggerLib(ABC):
    """Capabilities of a trigger subplugin.

    A trigger decides whether a course enters a workflow. The workflow
    manager only needs to know whether the trigger is invoked by a user
    (manual) or evaluated on a schedule (automatic), and whether more than
    one instance of it may exist.
    """

    name: str = ""

    @abstractmethod
    def is_manual_trigger(self) -> bool:
        """Return True if courses enter the workflow through a user action."""

    def has_multiple_instances(self) -> bool:
        """Return True if the trigger may be used in several workflows at once."""
        return True

    def instance_settings(self) -> list[str]:
        """Names of the settings every instance of this trigger carries."""
        return []


class StepLib(ABC):
    """Capabilities of a step subplugin."""

    name: str = ""

    def instance_settings(self) -> list[str]:
        """Names of the settings every instance of this step carries."""
        return []

    async def rollback_course(self, step_id: int, process_id: int, course_id: int) -> None:
        """Undo whatever this step did for the course of an aborted process.

        Args:
            step_id: Step instance ID.
            process_id: Process being rolled back.
            course_id: Course of the process.
        """
        logger.debug(
            "Step '%s' (instance %s) has nothing to roll back for course %s",
            self.name, step_id, course_id,
        )
