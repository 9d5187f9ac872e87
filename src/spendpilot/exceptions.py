"""
SpendPilot Exception Hierarchy

Domain-specific exceptions for corporate spend policy checks.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: SP_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class SpendPilotError(Exception):
    """
    Base exception for all SpendPilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (SP_*)
        details: Additional context about the error
        field_name: Offending input field, if the error is about one
    """
    message: str
    code: str = "SP_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    field_name: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.field_name:
            parts.append(f"(field: {self.field_name})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.field_name:
            result["field"] = self.field_name
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Scenario Errors
# =============================================================================

@dataclass
class InvalidScenario(SpendPilotError):
    """Scenario input failed validation (unknown enum, bad amount or time)."""
    code: str = "SP_INVALID_SCENARIO"


@dataclass
class InvalidPatch(SpendPilotError):
    """Scenario patch names an unknown field."""
    code: str = "SP_INVALID_PATCH"


# =============================================================================
# Policy Pack Errors
# =============================================================================

@dataclass
class PolicyLoadError(SpendPilotError):
    """Failed to load policy pack from file."""
    code: str = "SP_POLICY_LOAD_ERROR"


@dataclass
class PolicyValidationError(SpendPilotError):
    """Policy pack schema validation failed."""
    code: str = "SP_POLICY_VALIDATION_ERROR"


@dataclass
class PolicyVersionMismatch(SpendPilotError):
    """Policy pack schema version is not supported."""
    code: str = "SP_POLICY_VERSION_MISMATCH"
