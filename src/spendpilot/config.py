"""
SpendPilot Policy Configuration

Thresholds, allow-lists and suggested patch values for every module's
rule table. Defaults reproduce the stock corporate program; a policy
pack (see ``spendpilot.packs``) can override any of them.

PolicyConfig is read-only after load and safe to share across
concurrent evaluations.
"""
from __future__ import annotations

import hashlib
import json
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from .models import (
    Location,
    Marketplace,
    PurchaseCategory,
    RideCategory,
    Station,
    minutes_of_day,
)


# =============================================================================
# Module Sections
# =============================================================================

@dataclass(frozen=True)
class RidesPolicy:
    """Rides & Logistics rule table."""
    window_start: str = "06:00"
    window_end: str = "22:00"
    allowed_locations: tuple[Location, ...] = (Location.KAMPALA, Location.ENTEBBE)
    blocked_categories: tuple[RideCategory, ...] = (RideCategory.LUXURY,)
    approval_categories: tuple[RideCategory, ...] = (RideCategory.PREMIUM,)
    trip_limit: int = 600_000
    approval_threshold: int = 200_000

    # Suggested patch values
    suggested_time: str = "09:00"
    suggested_location: Location = Location.KAMPALA
    reduced_trip_amount: int = 200_000
    under_threshold_amount: int = 190_000

    def within_hours(self, hhmm: str) -> bool:
        """True if ``hhmm`` falls inside the inclusive allowed window."""
        minute = minutes_of_day(hhmm)
        return minutes_of_day(self.window_start) <= minute <= minutes_of_day(self.window_end)


@dataclass(frozen=True)
class ECommercePolicy:
    """E-Commerce rule table."""
    restricted_categories: tuple[PurchaseCategory, ...] = (PurchaseCategory.RESTRICTED,)
    fallback_category: PurchaseCategory = PurchaseCategory.OFFICE_SUPPLIES
    unapproved_vendor_limit: int = 300_000
    rfq_amount: int = 950_000
    threshold_marketplaces: tuple[Marketplace, ...] = (Marketplace.MY_LIVE_DEALZ,)
    marketplace_threshold: int = 1_000_000
    under_threshold_amount: int = 990_000
    alternate_marketplace: Marketplace = Marketplace.EVMART
    basket_limit: int = 2_000_000
    split_amount: int = 1_500_000


@dataclass(frozen=True)
class ChargingPolicy:
    """EVs & Charging rule table."""
    approved_stations: tuple[Station, ...] = (Station.KAMPALA_CBD, Station.ENTEBBE)
    suggested_station: Station = Station.KAMPALA_CBD
    session_limit: int = 300_000
    approval_threshold: int = 150_000
    reduced_amount: int = 150_000


@dataclass(frozen=True)
class OtherPolicy:
    """Rule table for modules without dedicated rules."""
    rfq_limit: int = 1_000_000
    rfq_amount: int = 950_000
    approval_threshold: int = 200_000
    under_threshold_amount: int = 190_000


# =============================================================================
# Policy Config
# =============================================================================

@dataclass(frozen=True)
class PolicyConfig:
    """
    Complete policy configuration.

    Usage:
        config = PolicyConfig()                       # stock program
        config = load_config_from_env()               # honours SP_POLICY_PACK
        engine = SpendPolicyEngine(config)
    """
    name: str = "Corporate default"
    version: str = "1.0"
    currency: str = "UGX"
    rides: RidesPolicy = field(default_factory=RidesPolicy)
    ecommerce: ECommercePolicy = field(default_factory=ECommercePolicy)
    charging: ChargingPolicy = field(default_factory=ChargingPolicy)
    other: OtherPolicy = field(default_factory=OtherPolicy)

    def format_amount(self, amount: int) -> str:
        """Format an amount the way reasons and summaries show it."""
        return f"{self.currency} {amount:,}"

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation (enums as wire values)."""
        return _jsonable(asdict(self))

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form of this config."""
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


# =============================================================================
# Environment
# =============================================================================

POLICY_PACK_ENV = "SP_POLICY_PACK"


def load_config_from_env(environ: Optional[dict[str, str]] = None) -> PolicyConfig:
    """
    Load the process-wide PolicyConfig.

    Reads ``SP_POLICY_PACK``; when unset, the built-in defaults apply.

    Raises:
        PolicyLoadError, PolicyValidationError, PolicyVersionMismatch:
            If the configured pack cannot be used
    """
    env = os.environ if environ is None else environ
    pack_path = env.get(POLICY_PACK_ENV)
    if not pack_path:
        return PolicyConfig()

    from .packs import load_policy_pack

    return load_policy_pack(pack_path)
