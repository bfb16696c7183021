"""Trigger subplugins."""

from __future__ import annotations

from lifecycle.subplugins.base import TriggerLib


class StartDateDelayTrigger(TriggerLib):
    """Triggers for courses whose start date lies more than ``delay`` seconds back."""

    name = "startdatedelay"

    def is_manual_trigger(self) -> bool:
        return False

    def instance_settings(self) -> list[str]:
        return ["delay"]


class CategoryTrigger(TriggerLib):
    """Triggers for courses within a course category."""

    name = "category"

    def is_manual_trigger(self) -> bool:
        return False

    def instance_settings(self) -> list[str]:
        return ["category_select"]


class ManualTrigger(TriggerLib):
    """Offers a tool to users that puts a single course into the workflow."""

    name = "manual"

    def is_manual_trigger(self) -> bool:
        return True

    def instance_settings(self) -> list[str]:
        return ["icon", "displayname", "capability"]


class SiteCourseTrigger(TriggerLib):
    """Excludes the site course from every workflow."""

    name = "sitecourse"

    def is_manual_trigger(self) -> bool:
        return False

    def has_multiple_instances(self) -> bool:
        return False


class DelayedCoursesTrigger(TriggerLib):
    """Excludes courses that were recently rolled back."""

    name = "delayedcourses"

    def is_manual_trigger(self) -> bool:
        return False

    def has_multiple_instances(self) -> bool:
        return False
