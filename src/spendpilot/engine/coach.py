"""
SpendPilot Coach Advisor

Proactive, non-blocking tips that steer requesters toward policy-safe
choices. Tips are issued per module whether or not a rule fired; a tip
carrying a patch can be applied like an alternative.
"""
from __future__ import annotations

from ..config import PolicyConfig
from ..models import CoachTip, ModuleKey, Payment, RideCategory, Scenario, ScenarioPatch


class CoachAdvisor:
    """Produces the coach tips for a scenario."""

    def __init__(self, config: PolicyConfig):
        self.config = config

    def tips(self, scenario: Scenario) -> tuple[CoachTip, ...]:
        if scenario.payment == Payment.PERSONAL:
            return self.personal_tips()
        if scenario.module == ModuleKey.RIDES:
            return self.rides_tips()
        if scenario.module == ModuleKey.ECOMMERCE:
            return self.ecommerce_tips(scenario)
        if scenario.module == ModuleKey.EVS:
            return self.charging_tips()
        return self.other_tips()

    def personal_tips(self) -> tuple[CoachTip, ...]:
        return (
            CoachTip(
                id="c-back",
                title="Switch back to CorporatePay when eligible",
                description="Use CorporatePay for business expenses to keep corporate receipts clean.",
            ),
        )

    def rides_tips(self) -> tuple[CoachTip, ...]:
        return (
            CoachTip(
                id="coach-ride-1",
                title="Use Standard rides to avoid approval",
                description="Standard rides are usually policy-safe and faster.",
                patch=ScenarioPatch.of(ride_category=RideCategory.STANDARD),
            ),
            CoachTip(
                id="coach-ride-2",
                title="Add purpose and cost center",
                description="Missing allocation fields can cause rework in approvals.",
            ),
        )

    def ecommerce_tips(self, scenario: Scenario) -> tuple[CoachTip, ...]:
        ec = self.config.ecommerce
        tips = [
            CoachTip(
                id="coach-ec-1",
                title="Use approved vendors to avoid approval",
                description="Approved vendors reduce procurement friction.",
                patch=ScenarioPatch.of(vendor_approved=True),
            ),
            CoachTip(
                id="coach-ec-2",
                title="Avoid restricted categories",
                description="Restricted items can be blocked even with approvals.",
                patch=ScenarioPatch.of(category=ec.fallback_category),
            ),
        ]
        if scenario.marketplace in ec.threshold_marketplaces:
            tips.append(CoachTip(
                id="coach-ec-3",
                title=f"{scenario.marketplace.label} tip",
                description=(
                    f"Keep basket under {self.config.format_amount(ec.marketplace_threshold)} "
                    "for faster checkout."
                ),
                patch=ScenarioPatch.of(amount=ec.under_threshold_amount),
            ))
        return tuple(tips)

    def charging_tips(self) -> tuple[CoachTip, ...]:
        ch = self.config.charging
        return (
            CoachTip(
                id="coach-ch-1",
                title="Use approved stations",
                description="Approved stations produce cleaner billing allocation.",
                patch=ScenarioPatch.of(station=ch.suggested_station),
            ),
            CoachTip(
                id="coach-ch-2",
                title="Keep sessions below threshold",
                description="This reduces approval overhead.",
                patch=ScenarioPatch.of(amount=ch.reduced_amount),
            ),
        )

    def other_tips(self) -> tuple[CoachTip, ...]:
        return (
            CoachTip(
                id="coach-oth-1",
                title="Prefer approved vendors and smaller amounts",
                description="This reduces approvals and declines.",
            ),
        )
