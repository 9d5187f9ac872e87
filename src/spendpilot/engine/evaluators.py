"""
SpendPilot Module Rule Evaluators

One evaluator per spend module. Each scans its rule table in a fixed
order, collecting Reasons and the AltActions that would clear them, then
applies its own outcome precedence. A personal-payment bypass runs
instead of any module rules when the requester pays personally.

Evaluators are pure: the same scenario always yields the same findings.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from ..config import PolicyConfig
from ..models import (
    AltAction,
    CoachTip,
    ModuleKey,
    Outcome,
    Payment,
    Reason,
    ReasonCode,
    RideCategory,
    Scenario,
)
from .alternatives import (
    alternative,
    corporate_payment_alternative,
    personal_payment_alternative,
)
from .coach import CoachAdvisor
from .reason_catalog import ReasonCatalog


@dataclass
class RuleFindings:
    """Raw output of one evaluator, before de-duplication."""
    outcome: Outcome
    reasons: list[Reason] = field(default_factory=list)
    alternatives: list[AltAction] = field(default_factory=list)
    coach: tuple[CoachTip, ...] = ()

    @property
    def codes(self) -> set[ReasonCode]:
        return {r.code for r in self.reasons}


class ModuleEvaluator:
    """
    Base class for module rule tables.

    Subclasses implement ``check`` (append reasons and alternatives in
    rule order) and ``decide`` (outcome precedence over reason codes).
    """

    module: ModuleKey
    ok_reason: str

    def __init__(self, config: PolicyConfig, catalog: ReasonCatalog, advisor: CoachAdvisor):
        self.config = config
        self.catalog = catalog
        self.advisor = advisor

    def evaluate(self, scenario: Scenario) -> RuleFindings:
        reasons: list[Reason] = []
        alternatives: list[AltAction] = []
        self.check(scenario, reasons, alternatives)
        alternatives.append(personal_payment_alternative())

        outcome = self.decide(scenario, {r.code for r in reasons})
        if not reasons:
            reasons.append(self.catalog.reason(self.ok_reason))

        return RuleFindings(
            outcome=outcome,
            reasons=reasons,
            alternatives=alternatives,
            coach=self.advisor.tips(scenario),
        )

    def check(self, scenario: Scenario, reasons: list[Reason], alternatives: list[AltAction]) -> None:
        raise NotImplementedError

    def decide(self, scenario: Scenario, codes: set[ReasonCode]) -> Outcome:
        raise NotImplementedError


# =============================================================================
# Personal Payment Bypass
# =============================================================================

class PersonalPaymentBypass:
    """Personal payments skip every corporate rule."""

    def __init__(self, catalog: ReasonCatalog, advisor: CoachAdvisor):
        self.catalog = catalog
        self.advisor = advisor

    def evaluate(self, scenario: Scenario) -> RuleFindings:
        return RuleFindings(
            outcome=Outcome.ALLOWED,
            reasons=[self.catalog.reason("personal.bypass")],
            alternatives=[corporate_payment_alternative()],
            coach=self.advisor.tips(scenario),
        )


# =============================================================================
# Rides & Logistics
# =============================================================================

class RidesEvaluator(ModuleEvaluator):
    """Time window, geo allow-list, ride category and per-trip amount rules."""

    module = ModuleKey.RIDES
    ok_reason = "rides.ok"

    HARD_CODES = frozenset({
        ReasonCode.TIME, ReasonCode.GEO, ReasonCode.CATEGORY, ReasonCode.BASKET,
    })

    def check(self, scenario, reasons, alternatives):
        rules = self.config.rides

        if not rules.within_hours(scenario.time_of_day):
            reasons.append(self.catalog.reason("rides.time"))
            alternatives.append(alternative(
                "alt-time",
                "Schedule within work hours",
                f"Pick a time between {rules.window_start} and {rules.window_end}.",
                Outcome.ALLOWED,
                time_of_day=rules.suggested_time,
            ))

        if scenario.location not in rules.allowed_locations:
            regions = " and ".join(loc.label for loc in rules.allowed_locations)
            reasons.append(self.catalog.reason("rides.geo", locations=regions))
            alternatives.append(alternative(
                "alt-geo",
                "Use approved region",
                f"Switch location to {' or '.join(loc.label for loc in rules.allowed_locations)}.",
                Outcome.ALLOWED,
                location=rules.suggested_location,
            ))

        if scenario.ride_category in rules.blocked_categories:
            reasons.append(self.catalog.reason(
                "rides.category", category=scenario.ride_category.label,
            ))
            alternatives.append(alternative(
                "alt-cat",
                "Switch to Standard",
                "Standard rides are allowed and usually do not require approval.",
                Outcome.ALLOWED,
                ride_category=RideCategory.STANDARD,
            ))
            alternatives.append(alternative(
                "alt-premium",
                "Switch to Premium",
                "Premium rides may require approval above threshold.",
                Outcome.APPROVAL_REQUIRED,
                ride_category=RideCategory.PREMIUM,
            ))

        if scenario.amount > rules.trip_limit:
            reasons.append(self.catalog.reason("rides.basket", trip_limit=rules.trip_limit))
            alternatives.append(alternative(
                "alt-reduce",
                "Reduce trip cost",
                "Choose Standard or split the trip if possible.",
                Outcome.APPROVAL_REQUIRED,
                ride_category=RideCategory.STANDARD,
                amount=rules.reduced_trip_amount,
            ))
        elif (
            scenario.ride_category in rules.approval_categories
            and scenario.amount > rules.approval_threshold
        ):
            reasons.append(self.catalog.reason(
                "rides.threshold",
                category=scenario.ride_category.label,
                threshold=rules.approval_threshold,
            ))
            alternatives.append(alternative(
                "alt-std",
                "Use Standard to avoid approval",
                "Standard rides usually pass policy checks faster.",
                Outcome.ALLOWED,
                ride_category=RideCategory.STANDARD,
            ))
            alternatives.append(alternative(
                "alt-lower",
                "Lower the amount",
                "If possible, keep the ride under the approval threshold.",
                Outcome.ALLOWED,
                amount=rules.under_threshold_amount,
            ))

    def decide(self, scenario, codes):
        if codes & self.HARD_CODES:
            return Outcome.BLOCKED
        if ReasonCode.THRESHOLD in codes:
            return Outcome.APPROVAL_REQUIRED
        return Outcome.ALLOWED


# =============================================================================
# E-Commerce
# =============================================================================

class ECommerceEvaluator(ModuleEvaluator):
    """Restricted categories, vendor approval, marketplace and basket rules."""

    module = ModuleKey.ECOMMERCE
    ok_reason = "ecommerce.ok"

    def check(self, scenario, reasons, alternatives):
        rules = self.config.ecommerce

        if scenario.category in rules.restricted_categories:
            reasons.append(self.catalog.reason("ecommerce.category"))
            alternatives.append(alternative(
                "alt-cat",
                "Choose an allowed category",
                "Select a different category or pay personally.",
                Outcome.ALLOWED,
                category=rules.fallback_category,
            ))

        if not scenario.vendor_approved:
            if scenario.amount <= rules.unapproved_vendor_limit:
                reasons.append(self.catalog.reason(
                    "ecommerce.vendor_soft", vendor_limit=rules.unapproved_vendor_limit,
                ))
                alternatives.append(alternative(
                    "alt-vendor",
                    "Switch to an approved vendor",
                    "Approved vendors reduce approvals and rejections.",
                    Outcome.ALLOWED,
                    vendor_approved=True,
                ))
            else:
                reasons.append(self.catalog.reason(
                    "ecommerce.vendor_hard", vendor_limit=rules.unapproved_vendor_limit,
                ))
                alternatives.append(alternative(
                    "alt-rfq",
                    "Create RFQ for high-value",
                    "Use RFQ/Quote flow for high-value assets.",
                    Outcome.APPROVAL_REQUIRED,
                    amount=rules.rfq_amount,
                    vendor_approved=True,
                ))

        if (
            scenario.marketplace in rules.threshold_marketplaces
            and scenario.amount > rules.marketplace_threshold
        ):
            reasons.append(self.catalog.reason(
                "ecommerce.threshold",
                marketplace=scenario.marketplace.label,
                threshold=rules.marketplace_threshold,
            ))
            alternatives.append(alternative(
                "alt-basket",
                "Reduce basket size",
                "Keep basket under the threshold to avoid approval.",
                Outcome.ALLOWED,
                amount=rules.under_threshold_amount,
            ))
            alternatives.append(alternative(
                "alt-market",
                f"Use {rules.alternate_marketplace.label} instead",
                f"{rules.alternate_marketplace.label} often has lower friction for corporate purchases.",
                Outcome.ALLOWED,
                marketplace=rules.alternate_marketplace,
            ))

        if scenario.amount > rules.basket_limit:
            reasons.append(self.catalog.reason(
                "ecommerce.basket", basket_limit=rules.basket_limit,
            ))
            alternatives.append(alternative(
                "alt-split",
                "Split the order",
                "Split into smaller orders or use RFQ/Quote Request.",
                Outcome.APPROVAL_REQUIRED,
                amount=rules.split_amount,
            ))

    def decide(self, scenario, codes):
        rules = self.config.ecommerce
        if (
            ReasonCode.CATEGORY in codes
            or (ReasonCode.VENDOR in codes and scenario.amount > rules.unapproved_vendor_limit)
            or (ReasonCode.BASKET in codes and scenario.amount > rules.basket_limit)
        ):
            return Outcome.BLOCKED
        if ReasonCode.THRESHOLD in codes or ReasonCode.VENDOR in codes:
            return Outcome.APPROVAL_REQUIRED
        return Outcome.ALLOWED


# =============================================================================
# EVs & Charging
# =============================================================================

class ChargingEvaluator(ModuleEvaluator):
    """Approved stations and per-session amount rules."""

    module = ModuleKey.EVS
    ok_reason = "charging.ok"

    def check(self, scenario, reasons, alternatives):
        rules = self.config.charging

        if scenario.station not in rules.approved_stations:
            stations = " or ".join(s.label for s in rules.approved_stations)
            reasons.append(self.catalog.reason("charging.station", stations=stations))
            alternatives.append(alternative(
                "alt-station",
                "Choose an approved station",
                f"Select {stations} station.",
                Outcome.ALLOWED,
                station=rules.suggested_station,
            ))

        if scenario.amount > rules.session_limit:
            reasons.append(self.catalog.reason(
                "charging.basket", session_limit=rules.session_limit,
            ))
            alternatives.append(alternative(
                "alt-lower",
                "Reduce charging amount",
                "Lower the session amount or request an exception.",
                Outcome.APPROVAL_REQUIRED,
                amount=rules.reduced_amount,
            ))
        elif scenario.amount > rules.approval_threshold:
            reasons.append(self.catalog.reason(
                "charging.threshold", threshold=rules.approval_threshold,
            ))
            alternatives.append(alternative(
                "alt-avoid",
                "Reduce to avoid approval",
                f"Keep session at or below {self.config.format_amount(rules.approval_threshold)}.",
                Outcome.ALLOWED,
                amount=rules.reduced_amount,
            ))

    def decide(self, scenario, codes):
        rules = self.config.charging
        if ReasonCode.STATION in codes or (
            ReasonCode.BASKET in codes and scenario.amount > rules.session_limit
        ):
            return Outcome.BLOCKED
        if ReasonCode.THRESHOLD in codes:
            return Outcome.APPROVAL_REQUIRED
        return Outcome.ALLOWED


# =============================================================================
# Other
# =============================================================================

class OtherEvaluator(ModuleEvaluator):
    """Amount-only rules for modules without a dedicated table."""

    module = ModuleKey.OTHER
    ok_reason = "other.ok"

    def check(self, scenario, reasons, alternatives):
        rules = self.config.other

        if scenario.amount > rules.rfq_limit:
            reasons.append(self.catalog.reason("other.basket", rfq_limit=rules.rfq_limit))
            alternatives.append(alternative(
                "alt-rfq",
                "Use RFQ/Quote Request",
                "Request quotes for high-value assets.",
                Outcome.APPROVAL_REQUIRED,
                amount=rules.rfq_amount,
            ))
        elif scenario.amount > rules.approval_threshold:
            reasons.append(self.catalog.reason(
                "other.threshold", threshold=rules.approval_threshold,
            ))
            alternatives.append(alternative(
                "alt-lower",
                "Reduce amount",
                "Keep amount under threshold for faster checkout.",
                Outcome.ALLOWED,
                amount=rules.under_threshold_amount,
            ))

    def decide(self, scenario, codes):
        if ReasonCode.BASKET in codes:
            return Outcome.BLOCKED
        if ReasonCode.THRESHOLD in codes:
            return Outcome.APPROVAL_REQUIRED
        return Outcome.ALLOWED


EVALUATOR_TYPES: tuple[type[ModuleEvaluator], ...] = (
    RidesEvaluator,
    ECommerceEvaluator,
    ChargingEvaluator,
    OtherEvaluator,
)


def build_evaluators(
    config: PolicyConfig, catalog: ReasonCatalog, advisor: CoachAdvisor
) -> dict[ModuleKey, ModuleEvaluator]:
    """Instantiate one evaluator per module."""
    return {cls.module: cls(config, catalog, advisor) for cls in EVALUATOR_TYPES}


def select_evaluator(
    scenario: Scenario,
    evaluators: dict[ModuleKey, ModuleEvaluator],
    bypass: PersonalPaymentBypass,
):
    """The personal bypass for personal payments, else the module's evaluator."""
    if scenario.payment == Payment.PERSONAL:
        return bypass
    return evaluators[scenario.module]
