"""Response schemas for the API."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ReasonOut(_Wire):
    """Why a rule fired."""
    code: str  # GEO|TIME|VENDOR|CATEGORY|BASKET|STATION|THRESHOLD|CAP|PROGRAM|OK
    title: str
    detail: str


class AltActionOut(_Wire):
    """A corrective change and the verdict it leads to."""
    id: str
    title: str
    description: str
    expected_outcome: str = Field(..., alias="expectedOutcome")
    patch: dict[str, Any]


class CoachTipOut(_Wire):
    """Proactive advice."""
    id: str
    title: str
    description: str
    patch: Optional[dict[str, Any]] = None


class NextActionOut(_Wire):
    """Primary call to action."""
    step: str
    label: str
    primary: bool


class EvaluateResponse(_Wire):
    """Response from a policy check."""
    outcome: str  # Allowed|ApprovalRequired|Blocked
    reasons: list[ReasonOut]
    alternatives: list[AltActionOut]
    coach: list[CoachTipOut]
    next_action: NextActionOut = Field(..., alias="nextAction")


class ChangeOut(_Wire):
    """One changed field."""
    field: str
    from_value: str = Field(..., alias="from")
    to_value: str = Field(..., alias="to")
    impact: str  # Improved|Worse|Neutral


class DiffResponse(_Wire):
    """Response from a scenario comparison."""
    changes: list[ChangeOut]


class ApplyResponse(_Wire):
    """Patched scenario and its fresh decision."""
    scenario: dict[str, Any]
    decision: EvaluateResponse


class PolicyConfigResponse(_Wire):
    """Active policy configuration."""
    name: str
    version: str
    fingerprint: str
    config: dict[str, Any]
