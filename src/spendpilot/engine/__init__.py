"""
SpendPilot Engine

Services for corporate spend policy checks.

Services:
- ReasonCatalog: Instantiate reasons for triggered rules
- ModuleEvaluators: Per-module rule tables and outcome precedence
- CoachAdvisor: Proactive tips
- DecisionAggregator: Assemble and de-duplicate the final Decision
- ConflictDiffer: Classify changes between two attempts
- SpendPolicyEngine: Facade over all of the above

Usage:
    from spendpilot.engine import SpendPolicyEngine

    engine = SpendPolicyEngine()
    decision = engine.evaluate(scenario)
"""
from __future__ import annotations

from .aggregator import DecisionAggregator
from .alternatives import (
    alternative,
    corporate_payment_alternative,
    dedupe_alternatives,
    personal_payment_alternative,
)
from .coach import CoachAdvisor
from .conflict_differ import TRACKED_FIELDS, ConflictDiffer
from .evaluators import (
    ChargingEvaluator,
    ECommerceEvaluator,
    ModuleEvaluator,
    OtherEvaluator,
    PersonalPaymentBypass,
    RidesEvaluator,
    RuleFindings,
    build_evaluators,
)
from .guidance import next_action, summarize
from .policy_engine import (
    SpendPolicyEngine,
    diff,
    evaluate,
    get_default_engine,
)
from .reason_catalog import REASONS, ReasonCatalog

__all__ = [
    "REASONS",
    "TRACKED_FIELDS",
    "ChargingEvaluator",
    "CoachAdvisor",
    "ConflictDiffer",
    "DecisionAggregator",
    "ECommerceEvaluator",
    "ModuleEvaluator",
    "OtherEvaluator",
    "PersonalPaymentBypass",
    "ReasonCatalog",
    "RidesEvaluator",
    "RuleFindings",
    "SpendPolicyEngine",
    "alternative",
    "build_evaluators",
    "corporate_payment_alternative",
    "dedupe_alternatives",
    "diff",
    "evaluate",
    "get_default_engine",
    "next_action",
    "personal_payment_alternative",
    "summarize",
]
