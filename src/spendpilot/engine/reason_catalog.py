"""
SpendPilot Reason Catalog

Closed table of every reason a module rule can produce. Each entry
pairs a ReasonCode with a title and a detail template; templates are
rendered against the active PolicyConfig so the text always quotes the
thresholds actually enforced.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..config import PolicyConfig
from ..models import Reason, ReasonCode


@dataclass(frozen=True)
class ReasonTemplate:
    """Uninstantiated reason: code, title and a str.format detail."""
    code: ReasonCode
    title: str
    detail: str


REASONS: dict[str, ReasonTemplate] = {
    # Personal payment bypass
    "personal.bypass": ReasonTemplate(
        ReasonCode.OK,
        "Personal payment selected",
        "Corporate policy checks do not block personal payments.",
    ),

    # Rides & Logistics
    "rides.time": ReasonTemplate(
        ReasonCode.TIME,
        "Outside allowed hours",
        "Corporate rides are allowed between {rides.window_start} and {rides.window_end}.",
    ),
    "rides.geo": ReasonTemplate(
        ReasonCode.GEO,
        "Geo restriction",
        "Corporate rides are limited to approved regions ({locations}).",
    ),
    "rides.category": ReasonTemplate(
        ReasonCode.CATEGORY,
        "{category} not allowed",
        "{category} rides are blocked for CorporatePay in this program.",
    ),
    "rides.basket": ReasonTemplate(
        ReasonCode.BASKET,
        "Amount exceeds per-trip limit",
        "This ride exceeds the allowed per-trip corporate limit of {trip_limit}.",
    ),
    "rides.threshold": ReasonTemplate(
        ReasonCode.THRESHOLD,
        "Approval required",
        "{category} rides above {threshold} require approval.",
    ),
    "rides.ok": ReasonTemplate(
        ReasonCode.OK,
        "Within policy",
        "This ride is within allowed region, hours, and category.",
    ),

    # E-Commerce
    "ecommerce.category": ReasonTemplate(
        ReasonCode.CATEGORY,
        "Restricted category",
        "This category is blocked for corporate purchases.",
    ),
    "ecommerce.vendor_soft": ReasonTemplate(
        ReasonCode.VENDOR,
        "Vendor not approved",
        "Unapproved vendors require approval up to {vendor_limit}.",
    ),
    "ecommerce.vendor_hard": ReasonTemplate(
        ReasonCode.VENDOR,
        "Vendor blocked for this amount",
        "Purchases above {vendor_limit} from unapproved vendors are blocked.",
    ),
    "ecommerce.threshold": ReasonTemplate(
        ReasonCode.THRESHOLD,
        "{marketplace} approval threshold",
        "{marketplace} baskets above {threshold} require approval.",
    ),
    "ecommerce.basket": ReasonTemplate(
        ReasonCode.BASKET,
        "Basket too large",
        "This basket exceeds the corporate purchase limit of {basket_limit}.",
    ),
    "ecommerce.ok": ReasonTemplate(
        ReasonCode.OK,
        "Within policy",
        "Purchase is within allowed marketplace, vendor rules, and limits.",
    ),

    # EVs & Charging
    "charging.station": ReasonTemplate(
        ReasonCode.STATION,
        "Station not approved",
        "Corporate charging is limited to approved stations ({stations}).",
    ),
    "charging.basket": ReasonTemplate(
        ReasonCode.BASKET,
        "Per-session limit exceeded",
        "Charging amount exceeds the allowed per-session limit of {session_limit}.",
    ),
    "charging.threshold": ReasonTemplate(
        ReasonCode.THRESHOLD,
        "Approval required",
        "Charging above {threshold} requires approval.",
    ),
    "charging.ok": ReasonTemplate(
        ReasonCode.OK,
        "Within policy",
        "Charging request is within allowed stations and limits.",
    ),

    # Other
    "other.basket": ReasonTemplate(
        ReasonCode.BASKET,
        "High value request",
        "Amounts above {rfq_limit} for this module should use RFQ/Quote or exception.",
    ),
    "other.threshold": ReasonTemplate(
        ReasonCode.THRESHOLD,
        "Approval required",
        "Amount above {threshold} requires approval for this module.",
    ),
    "other.ok": ReasonTemplate(
        ReasonCode.OK,
        "Within policy",
        "No blockers detected for this module.",
    ),
}


class ReasonCatalog:
    """
    Instantiates Reasons for triggered rules.

    Usage:
        catalog = ReasonCatalog(config)
        reason = catalog.reason("rides.threshold", category="Premium",
                                threshold=config.rides.approval_threshold)
    """

    def __init__(self, config: PolicyConfig):
        self.config = config

    def reason(self, key: str, **params: Any) -> Reason:
        """
        Render the reason registered under ``key``.

        Integer params are formatted as money (e.g. "UGX 200,000").

        Raises:
            KeyError: If ``key`` is not in the catalog
        """
        template = REASONS[key]
        values = {
            name: self.config.format_amount(value)
            if isinstance(value, int) and not isinstance(value, bool)
            else value
            for name, value in params.items()
        }
        return Reason(
            code=template.code,
            title=template.title.format(**values),
            detail=template.detail.format(rides=self.config.rides, **values),
        )

    def codes(self) -> set[ReasonCode]:
        """All codes a rule can produce."""
        return {t.code for t in REASONS.values()}
