"""
SpendPilot Scenario Models

A Scenario is the full description of a proposed transaction submitted
for a policy check. A ScenarioPatch is a partial override of a Scenario,
as proposed by alternatives and coach tips.

Both are immutable. Attributes are snake_case; the wire format (API,
CLI files, patch keys) uses camelCase.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Iterator, Mapping

from ..exceptions import InvalidPatch, InvalidScenario
from .enums import (
    Location,
    Marketplace,
    ModuleKey,
    Payment,
    PurchaseCategory,
    RideCategory,
    Station,
)

logger = logging.getLogger(__name__)


_TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")

# attribute name -> wire key
WIRE_KEYS: dict[str, str] = {
    "module": "module",
    "payment": "payment",
    "amount": "amount",
    "time_of_day": "timeOfDay",
    "location": "location",
    "ride_category": "rideCategory",
    "marketplace": "marketplace",
    "vendor_approved": "vendorApproved",
    "category": "category",
    "station": "station",
}
ATTRIBUTES: dict[str, str] = {wire: attr for attr, wire in WIRE_KEYS.items()}

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "module": ModuleKey,
    "payment": Payment,
    "location": Location,
    "ride_category": RideCategory,
    "marketplace": Marketplace,
    "category": PurchaseCategory,
    "station": Station,
}

# Fields only read by one module's rules
MODULE_FIELDS: dict[ModuleKey, tuple[str, ...]] = {
    ModuleKey.RIDES: ("ride_category",),
    ModuleKey.ECOMMERCE: ("marketplace", "vendor_approved", "category"),
    ModuleKey.EVS: ("station",),
    ModuleKey.OTHER: (),
}
_MODULE_SPECIFIC = frozenset(
    attr for attrs in MODULE_FIELDS.values() for attr in attrs
)


def minutes_of_day(hhmm: str) -> int:
    """Convert a validated "HH:MM" string to minutes past midnight."""
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def _wire(attr: str) -> str:
    return WIRE_KEYS.get(attr, attr)


def coerce_field(attr: str, value: Any) -> Any:
    """
    Convert a raw wire value into the typed value for a Scenario attribute.

    Strict: strings are accepted for enum fields only, and numbers or
    booleans are never converted from other types.

    Raises:
        InvalidScenario: If the value is not acceptable for the field
    """
    enum_type = _ENUM_FIELDS.get(attr)
    if enum_type is not None:
        if isinstance(value, enum_type):
            return value
        try:
            return enum_type(value)
        except ValueError:
            allowed = [m.value for m in enum_type]
            raise InvalidScenario(
                message=f"Unknown value {value!r} for {_wire(attr)}",
                field_name=_wire(attr),
                details={"allowed": allowed},
            )

    if attr == "amount":
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidScenario(
                message="amount must be a whole number of currency units",
                field_name="amount",
                details={"value": repr(value)},
            )
        if value < 0:
            raise InvalidScenario(
                message="amount must not be negative",
                field_name="amount",
                details={"value": value},
            )
        return value

    if attr == "time_of_day":
        if not isinstance(value, str) or not _TIME_PATTERN.match(value):
            raise InvalidScenario(
                message="timeOfDay must be a 24h HH:MM string",
                field_name="timeOfDay",
                details={"value": repr(value)},
            )
        return value

    if attr == "vendor_approved":
        if not isinstance(value, bool):
            raise InvalidScenario(
                message="vendorApproved must be a boolean",
                field_name="vendorApproved",
                details={"value": repr(value)},
            )
        return value

    raise InvalidPatch(
        message=f"Unknown scenario field: {_wire(attr)}",
        field_name=_wire(attr),
    )


def wire_value(value: Any) -> Any:
    """JSON-safe representation of a typed Scenario value."""
    if isinstance(value, Enum):
        return value.value
    return value


# =============================================================================
# Scenario
# =============================================================================

@dataclass(frozen=True)
class Scenario:
    """
    A proposed transaction.

    Module-specific fields are always carried, but only the rules of the
    selected module read them.

    Attributes:
        module: Spend module the transaction belongs to
        payment: Payment instrument
        amount: Whole currency units, non-negative
        time_of_day: "HH:MM" 24h
        location: Where the transaction happens
        ride_category: Rides only
        marketplace: E-Commerce only
        vendor_approved: E-Commerce only
        category: E-Commerce only
        station: EVs & Charging only
    """
    module: ModuleKey
    payment: Payment
    amount: int
    time_of_day: str
    location: Location

    # Rides
    ride_category: RideCategory = RideCategory.STANDARD

    # E-Commerce
    marketplace: Marketplace = Marketplace.OTHER
    vendor_approved: bool = False
    category: PurchaseCategory = PurchaseCategory.OFFICE_SUPPLIES

    # EVs & Charging
    station: Station = Station.OTHER

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            typed = coerce_field(f.name, value)
            if typed is not value:
                object.__setattr__(self, f.name, typed)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Scenario:
        """
        Build a Scenario from a wire (camelCase) mapping.

        Module-specific fields belonging to other modules are not
        validated: an unusable value there falls back to the default.

        Raises:
            InvalidScenario: If a required or relevant field is invalid
        """
        if not isinstance(data, Mapping):
            raise InvalidScenario(message="Scenario must be an object")

        for required in ("module", "payment", "amount", "timeOfDay", "location"):
            if data.get(required) is None:
                raise InvalidScenario(
                    message=f"Missing required field: {required}",
                    field_name=required,
                )

        module = coerce_field("module", data["module"])
        relevant = MODULE_FIELDS[module]

        values: dict[str, Any] = {}
        for key, raw in data.items():
            attr = ATTRIBUTES.get(key)
            if attr is None or raw is None:
                continue
            if attr in relevant or attr not in _MODULE_SPECIFIC:
                values[attr] = coerce_field(attr, raw)
                continue
            try:
                values[attr] = coerce_field(attr, raw)
            except InvalidScenario:
                logger.debug("Ignoring invalid %s for module %s", key, module.value)

        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire (camelCase) mapping."""
        return {
            _wire(f.name): wire_value(getattr(self, f.name))
            for f in fields(self)
        }

    def with_field(self, name: str, value: Any) -> Scenario:
        """Return a copy with one field replaced (attribute or wire name)."""
        attr = ATTRIBUTES.get(name, name)
        if attr not in WIRE_KEYS:
            raise InvalidPatch(
                message=f"Unknown scenario field: {name}",
                field_name=name,
            )
        return replace(self, **{attr: coerce_field(attr, value)})

    def apply(self, patch: ScenarioPatch) -> Scenario:
        """Return a copy with every change in the patch applied."""
        if not patch:
            return self
        return replace(self, **dict(patch.changes))


# =============================================================================
# Scenario Patch
# =============================================================================

@dataclass(frozen=True)
class ScenarioPatch:
    """
    An ordered, closed set of field overrides for a Scenario.

    Usage:
        patch = ScenarioPatch.of(ride_category=RideCategory.STANDARD, amount=200000)
        safer = scenario.apply(patch)
    """
    changes: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, **changes: Any) -> ScenarioPatch:
        """Build a patch from attribute-name keyword arguments."""
        return cls(tuple(
            (attr, coerce_field(attr, value)) for attr, value in changes.items()
        ))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ScenarioPatch:
        """
        Build a patch from a wire (camelCase) mapping.

        Raises:
            InvalidPatch: If a key is not a Scenario field
            InvalidScenario: If a value is invalid for its field
        """
        if not isinstance(data, Mapping):
            raise InvalidPatch(message="Patch must be an object")
        changes = []
        for key, raw in data.items():
            attr = ATTRIBUTES.get(key)
            if attr is None:
                raise InvalidPatch(
                    message=f"Unknown scenario field: {key}",
                    field_name=key,
                )
            changes.append((attr, coerce_field(attr, raw)))
        return cls(tuple(changes))

    def __bool__(self) -> bool:
        return bool(self.changes)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire (camelCase) mapping, in insertion order."""
        return {_wire(attr): wire_value(value) for attr, value in self.changes}

    def key(self) -> str:
        """Stable serialized form used to compare patches."""
        return json.dumps(self.to_dict(), separators=(",", ":"))
