"""SQLAlchemy models."""
from lifecycle.models.workflow import Workflow
from lifecycle.models.trigger import TriggerInstance
from lifecycle.models.step import StepInstance
from lifecycle.models.process import Process
from lifecycle.models.setting import Setting, SETTINGS_TYPE_STEP, SETTINGS_TYPE_TRIGGER

__all__ = [
    "Workflow",
    "TriggerInstance",
    "StepInstance",
    "Process",
    "Setting",
    "SETTINGS_TYPE_STEP",
    "SETTINGS_TYPE_TRIGGER",
]
