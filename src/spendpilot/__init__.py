"""
SpendPilot - Corporate Spend Policy Decision Engine

Given a proposed transaction (a Scenario), SpendPilot decides whether it
may proceed on a corporate payment instrument, needs approval, or is
blocked, and explains why, with concrete corrective alternatives and
coaching tips. It can also diff a scenario against a previous attempt.

Quick Start:
    from spendpilot import SpendPolicyEngine, Scenario

    engine = SpendPolicyEngine()
    decision = engine.evaluate({
        "module": "ECommerce", "payment": "CorporatePay", "amount": 1250000,
        "timeOfDay": "10:00", "location": "Kampala",
        "marketplace": "MyLiveDealz", "vendorApproved": False,
        "category": "OfficeSupplies",
    })
    decision.outcome          # Outcome.BLOCKED
    decision.reason_codes     # [ReasonCode.VENDOR, ReasonCode.THRESHOLD]

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"

from .config import PolicyConfig, load_config_from_env
from .engine import SpendPolicyEngine, diff, evaluate, get_default_engine
from .exceptions import (
    InvalidPatch,
    InvalidScenario,
    PolicyLoadError,
    PolicyValidationError,
    PolicyVersionMismatch,
    SpendPilotError,
)
from .models import (
    AltAction,
    Change,
    CoachTip,
    Decision,
    Impact,
    Location,
    Marketplace,
    ModuleKey,
    NextAction,
    NextStep,
    Outcome,
    Payment,
    PurchaseCategory,
    Reason,
    ReasonCode,
    RideCategory,
    Scenario,
    ScenarioPatch,
    Station,
)

__all__ = [
    "__version__",
    # Config
    "PolicyConfig",
    "load_config_from_env",
    # Engine
    "SpendPolicyEngine",
    "diff",
    "evaluate",
    "get_default_engine",
    # Exceptions
    "InvalidPatch",
    "InvalidScenario",
    "PolicyLoadError",
    "PolicyValidationError",
    "PolicyVersionMismatch",
    "SpendPilotError",
    # Models
    "AltAction",
    "Change",
    "CoachTip",
    "Decision",
    "Impact",
    "Location",
    "Marketplace",
    "ModuleKey",
    "NextAction",
    "NextStep",
    "Outcome",
    "Payment",
    "PurchaseCategory",
    "Reason",
    "ReasonCode",
    "RideCategory",
    "Scenario",
    "ScenarioPatch",
    "Station",
]
