"""
SpendPilot Engine Tests

Tests that verify:
1. Determinism (same scenario = same decision)
2. Personal bypass and non-empty reasons for every module
3. Alternative de-duplication (first occurrence wins, order kept)
4. Reference scenarios A and B
5. Apply-and-re-evaluate, and the module-level convenience functions
"""
import itertools

import pytest

from spendpilot import engine as engine_module
from spendpilot.config import PolicyConfig
from spendpilot.engine import (
    DecisionAggregator,
    RuleFindings,
    SpendPolicyEngine,
    alternative,
    dedupe_alternatives,
    personal_payment_alternative,
)
from spendpilot.engine.policy_engine import get_default_engine
from spendpilot.exceptions import InvalidPatch, InvalidScenario
from spendpilot.models import (
    Location,
    Marketplace,
    ModuleKey,
    Outcome,
    Payment,
    PurchaseCategory,
    Reason,
    ReasonCode,
    RideCategory,
    Scenario,
    ScenarioPatch,
    Station,
)
from tests.conftest import alt_ids, make_scenario, scenario_a, scenario_b


def sample_scenarios():
    """A spread of scenarios across every module and payment."""
    amounts = (0, 150_001, 250_000, 700_000, 1_250_000, 2_500_000)
    for module, payment, amount, time, location in itertools.product(
        list(ModuleKey),
        list(Payment),
        amounts,
        ("02:30", "09:30"),
        (Location.KAMPALA, Location.JINJA),
    ):
        yield make_scenario(
            module=module,
            payment=payment,
            amount=amount,
            time_of_day=time,
            location=location,
            ride_category=RideCategory.PREMIUM if amount % 2 else RideCategory.LUXURY,
            marketplace=Marketplace.MY_LIVE_DEALZ,
            vendor_approved=amount < 1_000_000,
            category=PurchaseCategory.RESTRICTED if amount == 0 else PurchaseCategory.ELECTRONICS,
            station=Station.OTHER if amount > 500_000 else Station.ENTEBBE,
        )


SAMPLES = list(sample_scenarios())


class TestProperties:
    """Invariants that hold for every scenario."""

    def test_deterministic(self, engine):
        for s in SAMPLES:
            first = engine.evaluate(s)
            assert engine.evaluate(s) == first
            assert engine.evaluate(s.to_dict()).to_dict() == first.to_dict()

    def test_separate_engines_agree(self, config):
        a, b = SpendPolicyEngine(config), SpendPolicyEngine(PolicyConfig())
        for s in SAMPLES:
            assert a.evaluate(s) == b.evaluate(s)

    def test_personal_bypass(self, engine):
        for s in SAMPLES:
            if s.payment == Payment.PERSONAL:
                decision = engine.evaluate(s)
                assert decision.outcome == Outcome.ALLOWED
                assert decision.reason_codes == [ReasonCode.OK]

    def test_reasons_never_empty(self, engine):
        for s in SAMPLES:
            assert len(engine.evaluate(s).reasons) >= 1

    def test_ok_only_when_alone(self, engine):
        for s in SAMPLES:
            codes = engine.evaluate(s).reason_codes
            if ReasonCode.OK in codes:
                assert codes == [ReasonCode.OK]

    def test_alternatives_unique(self, engine):
        for s in SAMPLES:
            keys = [a.dedupe_key for a in engine.evaluate(s).alternatives]
            assert len(keys) == len(set(keys))

    def test_corporate_always_offers_personal(self, engine):
        for s in SAMPLES:
            if s.payment == Payment.CORPORATE_PAY:
                assert alt_ids(engine.evaluate(s))[-1] == "alt-personal"

    def test_reserved_codes_never_raised(self, engine):
        for s in SAMPLES:
            codes = engine.evaluate(s).reason_codes
            assert ReasonCode.CAP not in codes
            assert ReasonCode.PROGRAM not in codes

    def test_luxury_ride_blocked(self, engine):
        for s in SAMPLES:
            if (
                s.module == ModuleKey.RIDES
                and s.payment == Payment.CORPORATE_PAY
                and s.ride_category == RideCategory.LUXURY
            ):
                assert engine.evaluate(s).outcome == Outcome.BLOCKED


class TestReferenceScenarios:
    """Known scenarios with fixed verdicts."""

    def test_scenario_a(self, engine):
        decision = engine.evaluate(scenario_a())
        assert decision.outcome == Outcome.ALLOWED
        assert decision.reason_codes == [ReasonCode.OK]
        assert alt_ids(decision) == ["alt-personal"]

    def test_scenario_b(self, engine):
        decision = engine.evaluate(scenario_b())
        assert decision.outcome == Outcome.BLOCKED
        assert decision.has_reason(ReasonCode.VENDOR)
        assert decision.has_reason(ReasonCode.THRESHOLD)
        ids = alt_ids(decision)
        assert "alt-rfq" in ids
        assert "alt-market" in ids

    def test_scenario_b_wire_shape(self, engine):
        payload = engine.evaluate(scenario_b()).to_dict()
        assert payload["outcome"] == "Blocked"
        assert [r["code"] for r in payload["reasons"]] == ["VENDOR", "THRESHOLD"]
        rfq = payload["alternatives"][0]
        assert rfq == {
            "id": "alt-rfq",
            "title": "Create RFQ for high-value",
            "description": "Use RFQ/Quote flow for high-value assets.",
            "expectedOutcome": "ApprovalRequired",
            "patch": {"amount": 950000, "vendorApproved": True},
        }

    def test_invalid_mapping_rejected(self, engine):
        data = scenario_a()
        data["location"] = "Mars"
        with pytest.raises(InvalidScenario):
            engine.evaluate(data)


class TestDeduplication:
    """(title, patch) de-duplication."""

    def test_first_occurrence_wins(self):
        a = alternative("a-1", "Lower", "first", Outcome.ALLOWED, amount=1)
        b = alternative("a-2", "Other", "x", Outcome.ALLOWED, amount=1)
        c = alternative("a-3", "Lower", "second", Outcome.BLOCKED, amount=1)
        d = alternative("a-4", "Lower", "different patch", Outcome.ALLOWED, amount=2)
        result = dedupe_alternatives([a, b, c, d])
        assert [x.id for x in result] == ["a-1", "a-2", "a-4"]
        assert result[0].description == "first"

    def test_patch_order_matters(self):
        a = alternative("a-1", "Fix", "", Outcome.ALLOWED, amount=1, vendor_approved=True)
        b = alternative("a-2", "Fix", "", Outcome.ALLOWED, vendor_approved=True, amount=1)
        assert len(dedupe_alternatives([a, b])) == 2

    def test_aggregator_dedupes(self):
        alt = personal_payment_alternative()
        findings = RuleFindings(
            outcome=Outcome.ALLOWED,
            reasons=[Reason(ReasonCode.OK, "Within policy", "")],
            alternatives=[alt, alt],
        )
        decision = DecisionAggregator().aggregate(findings)
        assert decision.alternatives == (alt,)

    def test_aggregator_requires_reasons(self):
        with pytest.raises(ValueError):
            DecisionAggregator().aggregate(RuleFindings(outcome=Outcome.ALLOWED))


class TestApply:
    """Apply a patch and re-evaluate."""

    def test_apply_alternative(self, engine):
        luxury = Scenario.from_dict({**scenario_a(), "rideCategory": "Luxury"})
        decision = engine.evaluate(luxury)
        alt = next(a for a in decision.alternatives if a.id == "alt-cat")
        updated, new_decision = engine.apply(luxury, alt.patch)
        assert updated.ride_category == RideCategory.STANDARD
        assert new_decision.outcome == alt.expected_outcome == Outcome.ALLOWED

    def test_apply_wire_patch(self, engine):
        updated, decision = engine.apply(scenario_b(), {"amount": 950000, "vendorApproved": True})
        assert updated.amount == 950000
        assert updated.vendor_approved is True
        assert decision.outcome == Outcome.ALLOWED

    def test_apply_unknown_field(self, engine):
        with pytest.raises(InvalidPatch):
            engine.apply(scenario_a(), {"colour": "red"})

    def test_apply_invalid_value(self, engine):
        with pytest.raises(InvalidScenario):
            engine.apply(scenario_a(), {"amount": -10})

    def test_apply_coach_tip(self, engine):
        s = Scenario.from_dict({**scenario_b(), "amount": 1_100_000, "vendorApproved": True})
        decision = engine.evaluate(s)
        assert decision.outcome == Outcome.APPROVAL_REQUIRED
        tip = next(c for c in decision.coach if c.id == "coach-ec-3")
        _, after = engine.apply(s, tip.patch)
        assert after.outcome == Outcome.ALLOWED

    def test_apply_empty_patch(self, engine):
        s = Scenario.from_dict(scenario_a())
        updated, _ = engine.apply(s, ScenarioPatch())
        assert updated is s


class TestDefaultEngine:
    """Module-level convenience functions."""

    @pytest.fixture(autouse=True)
    def reset_default(self, monkeypatch):
        monkeypatch.setattr("spendpilot.engine.policy_engine._default_engine", None)
        monkeypatch.delenv("SP_POLICY_PACK", raising=False)

    def test_default_engine_cached(self):
        assert get_default_engine() is get_default_engine()
        assert get_default_engine().config == PolicyConfig()

    def test_evaluate(self):
        assert engine_module.evaluate(scenario_a()).outcome == Outcome.ALLOWED

    def test_diff(self):
        changes = engine_module.diff(scenario_a(), {**scenario_a(), "amount": 100000})
        assert [c.field for c in changes] == ["Amount"]

    def test_reads_pack_from_env(self, monkeypatch, tmp_path):
        pack = tmp_path / "strict.yaml"
        pack.write_text('schema_version: "1.0.0"\nname: Strict\nrides:\n  trip_limit: 100000\n  approval_threshold: 50000\n')
        monkeypatch.setenv("SP_POLICY_PACK", str(pack))
        engine = get_default_engine()
        assert engine.config.name == "Strict"
        assert engine.evaluate(scenario_a()).outcome == Outcome.BLOCKED
