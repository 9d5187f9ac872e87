"""
SpendPilot Policy Engine

Facade over the rule evaluators and the conflict differ.

Key features:
- evaluate(): Scenario -> Decision (outcome, reasons, alternatives, coach)
- diff(): (previous, current) -> field-level Changes with impact
- apply(): apply an alternative's patch and re-evaluate

The engine holds only read-only configuration, so one instance can serve
concurrent callers.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from ..config import PolicyConfig, load_config_from_env
from ..models import Change, Decision, NextAction, Scenario, ScenarioPatch
from .aggregator import DecisionAggregator
from .coach import CoachAdvisor
from .conflict_differ import ConflictDiffer
from .evaluators import (
    ModuleEvaluator,
    PersonalPaymentBypass,
    build_evaluators,
    select_evaluator,
)
from .guidance import next_action, summarize
from .reason_catalog import ReasonCatalog

logger = logging.getLogger(__name__)

ScenarioInput = Union[Scenario, Mapping[str, Any]]


def _as_scenario(value: ScenarioInput) -> Scenario:
    if isinstance(value, Scenario):
        return value
    return Scenario.from_dict(value)


@dataclass
class SpendPolicyEngine:
    """
    Evaluates scenarios against a PolicyConfig.

    Usage:
        engine = SpendPolicyEngine()

        decision = engine.evaluate({
            "module": "Rides", "payment": "CorporatePay", "amount": 160000,
            "timeOfDay": "09:30", "location": "Kampala", "rideCategory": "Standard",
        })

        changes = engine.diff(previous_attempt, scenario)
    """

    config: PolicyConfig = field(default_factory=PolicyConfig)

    _evaluators: dict = field(init=False, repr=False)
    _bypass: PersonalPaymentBypass = field(init=False, repr=False)
    _aggregator: DecisionAggregator = field(init=False, repr=False)
    _differ: ConflictDiffer = field(init=False, repr=False)

    def __post_init__(self) -> None:
        catalog = ReasonCatalog(self.config)
        advisor = CoachAdvisor(self.config)
        self._evaluators = build_evaluators(self.config, catalog, advisor)
        self._bypass = PersonalPaymentBypass(catalog, advisor)
        self._aggregator = DecisionAggregator()
        self._differ = ConflictDiffer(self.config)

    def evaluate(self, scenario: ScenarioInput) -> Decision:
        """
        Evaluate a scenario.

        Args:
            scenario: Scenario, or its wire mapping

        Returns:
            Decision

        Raises:
            InvalidScenario: If a wire mapping fails validation
        """
        scenario = _as_scenario(scenario)
        evaluator = select_evaluator(scenario, self._evaluators, self._bypass)
        decision = self._aggregator.aggregate(evaluator.evaluate(scenario))
        logger.debug(
            "Evaluated %s/%s amount=%d -> %s %s",
            scenario.module.value,
            scenario.payment.value,
            scenario.amount,
            decision.outcome.value,
            [c.value for c in decision.reason_codes],
        )
        return decision

    def diff(self, previous: ScenarioInput, current: ScenarioInput) -> list[Change]:
        """Classify every field changed between two scenarios."""
        return self._differ.diff(_as_scenario(previous), _as_scenario(current))

    def apply(
        self, scenario: ScenarioInput, patch: Union[ScenarioPatch, Mapping[str, Any]]
    ) -> tuple[Scenario, Decision]:
        """
        Apply a patch and re-evaluate.

        Raises:
            InvalidPatch: If the patch names an unknown field
            InvalidScenario: If a value is invalid
        """
        if not isinstance(patch, ScenarioPatch):
            patch = ScenarioPatch.from_dict(patch)
        updated = _as_scenario(scenario).apply(patch)
        return updated, self.evaluate(updated)

    def next_action(self, scenario: ScenarioInput, decision: Optional[Decision] = None) -> NextAction:
        scenario = _as_scenario(scenario)
        return next_action(scenario, decision or self.evaluate(scenario))

    def summarize(self, scenario: ScenarioInput, decision: Optional[Decision] = None) -> str:
        scenario = _as_scenario(scenario)
        return summarize(scenario, decision or self.evaluate(scenario), self.config)

    def evaluator_for(self, scenario: Scenario) -> Union[ModuleEvaluator, PersonalPaymentBypass]:
        return select_evaluator(scenario, self._evaluators, self._bypass)


# =============================================================================
# Module-level Engine Instance
# =============================================================================

_default_engine: Optional[SpendPolicyEngine] = None


def get_default_engine() -> SpendPolicyEngine:
    """Get or create the default engine, configured from the environment."""
    global _default_engine
    if _default_engine is None:
        _default_engine = SpendPolicyEngine(load_config_from_env())
    return _default_engine


def evaluate(scenario: ScenarioInput) -> Decision:
    """
    Evaluate a scenario using the default engine.

    Convenience function for simple use cases.
    """
    return get_default_engine().evaluate(scenario)


def diff(previous: ScenarioInput, current: ScenarioInput) -> list[Change]:
    """
    Diff two scenarios using the default engine.

    Convenience function for simple use cases.
    """
    return get_default_engine().diff(previous, current)
