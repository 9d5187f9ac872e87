"""
SpendPilot Conflict Differ

Compares a previous attempt with the current scenario and classifies
each changed field as Improved, Worse or Neutral for policy purposes.

Heuristics exist for VendorApproved, RideCategory, Location, Payment
and Amount, plus a one-directional rule for Time. Module, Marketplace,
Category and Station changes are always Neutral.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from ..config import PolicyConfig
from ..models import (
    Change,
    Impact,
    ModuleKey,
    Payment,
    Scenario,
    wire_value,
)

Classifier = Callable[[Any, Any], Impact]

# Output order; (label, attribute, module that makes it tracked or None)
TRACKED_FIELDS: tuple[tuple[str, str, Optional[ModuleKey]], ...] = (
    ("Module", "module", None),
    ("Payment", "payment", None),
    ("Amount", "amount", None),
    ("Time", "time_of_day", None),
    ("Location", "location", None),
    ("RideCategory", "ride_category", ModuleKey.RIDES),
    ("Marketplace", "marketplace", ModuleKey.ECOMMERCE),
    ("VendorApproved", "vendor_approved", ModuleKey.ECOMMERCE),
    ("Category", "category", ModuleKey.ECOMMERCE),
    ("Station", "station", ModuleKey.EVS),
)


def display(value: Any) -> str:
    """String form used to detect and report a change."""
    value = wire_value(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConflictDiffer:
    """
    Field-by-field comparison of two scenarios.

    Usage:
        differ = ConflictDiffer(config)
        changes = differ.diff(previous, current)
    """

    def __init__(self, config: PolicyConfig):
        self.config = config
        self._classifiers: dict[str, Classifier] = {
            "vendor_approved": self._vendor_approved,
            "ride_category": self._ride_category,
            "location": self._location,
            "payment": self._payment,
            "amount": self._amount,
            "time_of_day": self._time,
        }

    def diff(self, previous: Scenario, current: Scenario) -> list[Change]:
        modules = {previous.module, current.module}
        changes = []
        for label, attr, module in TRACKED_FIELDS:
            if module is not None and module not in modules:
                continue
            before = getattr(previous, attr)
            after = getattr(current, attr)
            if display(before) == display(after):
                continue
            classify = self._classifiers.get(attr, _neutral)
            changes.append(Change(
                field=label,
                from_value=display(before),
                to_value=display(after),
                impact=classify(before, after),
            ))
        return changes

    # -------------------------------------------------------------------------
    # Heuristics
    # -------------------------------------------------------------------------

    def _vendor_approved(self, before: bool, after: bool) -> Impact:
        if not before and after:
            return Impact.IMPROVED
        if before and not after:
            return Impact.WORSE
        return Impact.NEUTRAL

    def _ride_category(self, before, after) -> Impact:
        blocked = self.config.rides.blocked_categories
        if before in blocked and after not in blocked:
            return Impact.IMPROVED
        if before not in blocked and after in blocked:
            return Impact.WORSE
        return Impact.NEUTRAL

    def _location(self, before, after) -> Impact:
        allowed = self.config.rides.allowed_locations
        if before not in allowed and after in allowed:
            return Impact.IMPROVED
        if before in allowed and after not in allowed:
            return Impact.WORSE
        return Impact.NEUTRAL

    def _payment(self, before, after) -> Impact:
        if before == Payment.CORPORATE_PAY and after == Payment.PERSONAL:
            return Impact.IMPROVED
        if before == Payment.PERSONAL and after == Payment.CORPORATE_PAY:
            return Impact.WORSE
        return Impact.NEUTRAL

    def _amount(self, before: int, after: int) -> Impact:
        if after < before:
            return Impact.IMPROVED
        if after > before:
            return Impact.WORSE
        return Impact.NEUTRAL

    def _time(self, before: str, after: str) -> Impact:
        # No Worse case: moving out of the window is reported as Neutral.
        rides = self.config.rides
        if not rides.within_hours(before) and rides.within_hours(after):
            return Impact.IMPROVED
        return Impact.NEUTRAL


def _neutral(before: Any, after: Any) -> Impact:
    return Impact.NEUTRAL
