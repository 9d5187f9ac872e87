"""
SpendPilot Models

Enumerations, the Scenario input, and the Decision output records.
"""
from __future__ import annotations

from .enums import (
    Impact,
    Location,
    Marketplace,
    ModuleKey,
    NextStep,
    Outcome,
    Payment,
    PurchaseCategory,
    ReasonCode,
    RideCategory,
    Station,
)
from .scenario import (
    ATTRIBUTES,
    MODULE_FIELDS,
    WIRE_KEYS,
    Scenario,
    ScenarioPatch,
    coerce_field,
    minutes_of_day,
    wire_value,
)
from .decision import (
    AltAction,
    Change,
    CoachTip,
    Decision,
    NextAction,
    Reason,
)

__all__ = [
    # Enums
    "Impact",
    "Location",
    "Marketplace",
    "ModuleKey",
    "NextStep",
    "Outcome",
    "Payment",
    "PurchaseCategory",
    "ReasonCode",
    "RideCategory",
    "Station",
    # Scenario
    "ATTRIBUTES",
    "MODULE_FIELDS",
    "WIRE_KEYS",
    "Scenario",
    "ScenarioPatch",
    "coerce_field",
    "minutes_of_day",
    "wire_value",
    # Decision
    "AltAction",
    "Change",
    "CoachTip",
    "Decision",
    "NextAction",
    "Reason",
]
