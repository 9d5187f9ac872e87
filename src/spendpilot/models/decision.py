"""
SpendPilot Decision Models

Output records of a policy check:
- Reason: why a rule fired (or that none did)
- AltAction: a minimal corrective change, expressed as a patch
- CoachTip: proactive advice, independent of violations
- Decision: the aggregate result of one evaluation
- Change: one field-level difference between two scenarios
- NextAction: the primary call to action after a decision

All records are immutable and created fresh per call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .enums import Impact, NextStep, Outcome, ReasonCode
from .scenario import ScenarioPatch


@dataclass(frozen=True)
class Reason:
    """A structured explanation for a policy verdict."""
    code: ReasonCode
    title: str
    detail: str

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "title": self.title, "detail": self.detail}


@dataclass(frozen=True)
class AltAction:
    """
    A corrective change that would move the scenario to ``expected_outcome``.

    Attributes:
        id: Stable identifier (e.g. "alt-time")
        title: Short action label
        description: One-line explanation
        expected_outcome: Verdict expected once the patch is applied
        patch: Fields to override
    """
    id: str
    title: str
    description: str
    expected_outcome: Outcome
    patch: ScenarioPatch

    @property
    def dedupe_key(self) -> tuple[str, str]:
        return (self.title, self.patch.key())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "expectedOutcome": self.expected_outcome.value,
            "patch": self.patch.to_dict(),
        }


@dataclass(frozen=True)
class CoachTip:
    """Advisory tip; ``patch`` is set when the tip can be applied directly."""
    id: str
    title: str
    description: str
    patch: Optional[ScenarioPatch] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
        }
        if self.patch is not None:
            result["patch"] = self.patch.to_dict()
        return result


@dataclass(frozen=True)
class Decision:
    """
    Result of evaluating one scenario.

    Invariants:
    - ``reasons`` is never empty
    - no two ``alternatives`` share the same (title, patch)
    """
    outcome: Outcome
    reasons: tuple[Reason, ...]
    alternatives: tuple[AltAction, ...] = ()
    coach: tuple[CoachTip, ...] = ()

    @property
    def reason_codes(self) -> list[ReasonCode]:
        return [r.code for r in self.reasons]

    def has_reason(self, code: ReasonCode) -> bool:
        return any(r.code == code for r in self.reasons)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "reasons": [r.to_dict() for r in self.reasons],
            "alternatives": [a.to_dict() for a in self.alternatives],
            "coach": [c.to_dict() for c in self.coach],
        }


@dataclass(frozen=True)
class Change:
    """One changed field between a previous and a current scenario."""
    field: str
    from_value: str
    to_value: str
    impact: Impact

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "from": self.from_value,
            "to": self.to_value,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class NextAction:
    """Primary call to action for a decision."""
    step: NextStep
    label: str
    primary: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"step": self.step.value, "label": self.label, "primary": self.primary}
