"""
SpendPilot Decision Aggregator

Assembles the final Decision from one evaluator's findings.

Exactly one evaluator runs per call, so there is no cross-module
precedence here: the outcome is the evaluator's own. The aggregator
de-duplicates alternatives and guarantees the reasons invariant.
"""
from __future__ import annotations

from ..models import Decision
from .alternatives import dedupe_alternatives
from .evaluators import RuleFindings


class DecisionAggregator:
    """Turns RuleFindings into an immutable Decision."""

    def aggregate(self, findings: RuleFindings) -> Decision:
        if not findings.reasons:
            raise ValueError("Evaluator produced no reasons")
        return Decision(
            outcome=findings.outcome,
            reasons=tuple(findings.reasons),
            alternatives=dedupe_alternatives(findings.alternatives),
            coach=tuple(findings.coach),
        )
