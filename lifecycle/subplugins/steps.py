"""Step subplugins."""

from __future__ import annotations

from lifecycle.subplugins.base import StepLib


class EmailStep(StepLib):
    """Notifies the course teachers and waits for their response."""

    name = "email"

    def instance_settings(self) -> list[str]:
        return ["responsetimeout", "subject", "content", "contenthtml"]


class CreateBackupStep(StepLib):
    """Creates a backup of the course."""

    name = "createbackup"

    def instance_settings(self) -> list[str]:
        return ["maximumbackupspercron"]


class DeleteCourseStep(StepLib):
    """Deletes the course."""

    name = "deletecourse"

    def instance_settings(self) -> list[str]:
        return ["maximumdeletionspercron"]
