"""Trigger and step subplugins."""
from lifecycle.subplugins.base import StepLib, TriggerLib
from lifecycle.subplugins.registry import get_lib, get_step_lib, get_trigger_lib

__all__ = [
    "StepLib",
    "TriggerLib",
    "get_lib",
    "get_step_lib",
    "get_trigger_lib",
]
