"""Registry of the available trigger and step subplugins.

The set of subplugins is closed: every kind is registered here and looked
up by name.
"""

from __future__ import annotations

from lifecycle.errors import UnknownSubpluginError
from lifecycle.models.setting import SETTINGS_TYPE_TRIGGER
from lifecycle.subplugins.base import StepLib, TriggerLib
from lifecycle.subplugins.steps import CreateBackupStep, DeleteCourseStep, EmailStep
from lifecycle.subplugins.triggers import (
    CategoryTrigger,
    DelayedCoursesTrigger,
    ManualTrigger,
    SiteCourseTrigger,
    StartDateDelayTrigger,
)

TRIGGERS: dict[str, TriggerLib] = {
    lib.name: lib
    for lib in (
        StartDateDelayTrigger(),
        CategoryTrigger(),
        ManualTrigger(),
        SiteCourseTrigger(),
        DelayedCoursesTrigger(),
    )
}

STEPS: dict[str, StepLib] = {
    lib.name: lib
    for lib in (
        EmailStep(),
        CreateBackupStep(),
        DeleteCourseStep(),
    )
}


def get_trigger_lib(subpluginname: str) -> TriggerLib:
    """Return the trigger subplugin registered under ``subpluginname``.

    Raises:
        UnknownSubpluginError: If no trigger has that name.
    """
    try:
        return TRIGGERS[subpluginname]
    except KeyError:
        raise UnknownSubpluginError("trigger", subpluginname) from None


def get_step_lib(subpluginname: str) -> StepLib:
    """Return the step subplugin registered under ``subpluginname``.

    Raises:
        UnknownSubpluginError: If no step has that name.
    """
    try:
        return STEPS[subpluginname]
    except KeyError:
        raise UnknownSubpluginError("step", subpluginname) from None


def get_lib(settings_type: str, subpluginname: str) -> TriggerLib | StepLib:
    """Return the subplugin for a settings scope (``trigger`` or ``step``)."""
    if settings_type == SETTINGS_TYPE_TRIGGER:
        return get_trigger_lib(subpluginname)
    return get_step_lib(subpluginname)
