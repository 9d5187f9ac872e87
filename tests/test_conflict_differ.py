"""
Tests for the ConflictDiffer: which fields are tracked, in what order,
and how each change is classified.
"""
import pytest

from spendpilot.config import PolicyConfig, RidesPolicy
from spendpilot.engine import ConflictDiffer
from spendpilot.models import (
    Impact,
    Location,
    Marketplace,
    ModuleKey,
    Payment,
    PurchaseCategory,
    RideCategory,
    Station,
)
from tests.conftest import make_charge, make_purchase, make_ride, make_scenario


@pytest.fixture
def differ(config) -> ConflictDiffer:
    return ConflictDiffer(config)


def only_change(changes):
    assert len(changes) == 1, changes
    return changes[0]


class TestTracking:
    """Tracked fields and output order."""

    @pytest.mark.parametrize("scenario", [
        make_ride(), make_purchase(), make_charge(), make_scenario(),
    ])
    def test_identical_scenarios(self, differ, scenario):
        assert differ.diff(scenario, scenario) == []

    def test_equal_copies(self, differ):
        assert differ.diff(make_purchase(), make_purchase()) == []

    def test_fixed_field_order(self, differ):
        prev = make_ride(amount=300_000, time_of_day="23:00", location=Location.JINJA,
                         ride_category=RideCategory.LUXURY)
        cur = make_ride(amount=100_000, time_of_day="09:00", location=Location.KAMPALA,
                        ride_category=RideCategory.STANDARD, payment=Payment.PERSONAL)
        assert [c.field for c in differ.diff(prev, cur)] == [
            "Payment", "Amount", "Time", "Location", "RideCategory",
        ]

    def test_module_specific_fields_need_module(self, differ):
        prev = make_ride().with_field("station", Station.ENTEBBE)
        cur = make_ride().with_field("station", Station.KAMPALA_CBD)
        assert differ.diff(prev, cur) == []

    def test_either_module_tracks_fields(self, differ):
        prev = make_charge(station=Station.OTHER)
        cur = make_scenario(module=ModuleKey.RIDES, amount=100_000,
                            ride_category=RideCategory.PREMIUM)
        fields = [c.field for c in differ.diff(prev, cur)]
        assert fields == ["Module", "RideCategory"]

    def test_string_forms(self, differ):
        prev = make_purchase(vendor_approved=False, amount=250_000)
        cur = make_purchase(vendor_approved=True, amount=250_000)
        change = only_change(differ.diff(prev, cur))
        assert change.to_dict() == {
            "field": "VendorApproved", "from": "false", "to": "true", "impact": "Improved",
        }


class TestHeuristics:
    """Per-field impact classification."""

    @pytest.mark.parametrize("before,after,impact", [
        (False, True, Impact.IMPROVED),
        (True, False, Impact.WORSE),
    ])
    def test_vendor_approved(self, differ, before, after, impact):
        change = only_change(differ.diff(
            make_purchase(vendor_approved=before), make_purchase(vendor_approved=after),
        ))
        assert change.impact == impact

    @pytest.mark.parametrize("before,after,impact", [
        (RideCategory.LUXURY, RideCategory.STANDARD, Impact.IMPROVED),
        (RideCategory.LUXURY, RideCategory.PREMIUM, Impact.IMPROVED),
        (RideCategory.STANDARD, RideCategory.LUXURY, Impact.WORSE),
        (RideCategory.PREMIUM, RideCategory.LUXURY, Impact.WORSE),
        (RideCategory.STANDARD, RideCategory.PREMIUM, Impact.NEUTRAL),
        (RideCategory.PREMIUM, RideCategory.STANDARD, Impact.NEUTRAL),
    ])
    def test_ride_category(self, differ, before, after, impact):
        change = only_change(differ.diff(
            make_ride(ride_category=before), make_ride(ride_category=after),
        ))
        assert change.field == "RideCategory"
        assert change.impact == impact

    @pytest.mark.parametrize("before,after,impact", [
        (Location.JINJA, Location.KAMPALA, Impact.IMPROVED),
        (Location.OTHER, Location.ENTEBBE, Impact.IMPROVED),
        (Location.KAMPALA, Location.JINJA, Impact.WORSE),
        (Location.ENTEBBE, Location.OTHER, Impact.WORSE),
        (Location.KAMPALA, Location.ENTEBBE, Impact.NEUTRAL),
        (Location.JINJA, Location.OTHER, Impact.NEUTRAL),
    ])
    def test_location(self, differ, before, after, impact):
        change = only_change(differ.diff(make_ride(location=before), make_ride(location=after)))
        assert change.impact == impact

    def test_payment(self, differ):
        corp, personal = make_scenario(), make_scenario(payment=Payment.PERSONAL)
        assert only_change(differ.diff(corp, personal)).impact == Impact.IMPROVED
        assert only_change(differ.diff(personal, corp)).impact == Impact.WORSE

    @pytest.mark.parametrize("low,high", [(0, 1), (190_000, 200_000), (1, 10_000_000)])
    def test_amount_symmetry(self, differ, low, high):
        a, b = make_scenario(amount=low), make_scenario(amount=high)
        assert only_change(differ.diff(b, a)).impact == Impact.IMPROVED
        assert only_change(differ.diff(a, b)).impact == Impact.WORSE

    def test_amount_string_form(self, differ):
        change = only_change(differ.diff(make_scenario(amount=250_000), make_scenario(amount=190_000)))
        assert (change.from_value, change.to_value) == ("250000", "190000")

    @pytest.mark.parametrize("before,after,impact", [
        ("02:30", "09:00", Impact.IMPROVED),
        ("22:01", "22:00", Impact.IMPROVED),
        ("09:00", "23:00", Impact.NEUTRAL),
        ("09:00", "10:00", Impact.NEUTRAL),
        ("01:00", "02:00", Impact.NEUTRAL),
    ])
    def test_time(self, differ, before, after, impact):
        change = only_change(differ.diff(make_ride(time_of_day=before), make_ride(time_of_day=after)))
        assert change.field == "Time"
        assert change.impact == impact

    def test_unclassified_fields_neutral(self, differ):
        prev = make_purchase(marketplace=Marketplace.MY_LIVE_DEALZ, category=PurchaseCategory.RESTRICTED)
        cur = make_purchase(marketplace=Marketplace.EVMART, category=PurchaseCategory.OFFICE_SUPPLIES)
        changes = differ.diff(prev, cur)
        assert [c.field for c in changes] == ["Marketplace", "Category"]
        assert {c.impact for c in changes} == {Impact.NEUTRAL}

    def test_station_neutral(self, differ):
        change = only_change(differ.diff(make_charge(station=Station.OTHER), make_charge()))
        assert change.field == "Station"
        assert change.impact == Impact.NEUTRAL

    def test_module_neutral(self, differ):
        changes = differ.diff(make_scenario(module=ModuleKey.OTHER), make_scenario(module=ModuleKey.RIDES))
        assert changes[0].field == "Module"
        assert changes[0].impact == Impact.NEUTRAL


class TestConfiguredHeuristics:
    """Location, category and time heuristics follow the active policy."""

    def test_custom_window(self):
        config = PolicyConfig(rides=RidesPolicy(window_start="08:00", window_end="18:00"))
        change = only_change(ConflictDiffer(config).diff(
            make_ride(time_of_day="19:00"), make_ride(time_of_day="17:00"),
        ))
        assert change.impact == Impact.IMPROVED

    def test_custom_locations(self):
        config = PolicyConfig(rides=RidesPolicy(allowed_locations=(Location.JINJA,)))
        change = only_change(ConflictDiffer(config).diff(
            make_ride(location=Location.KAMPALA), make_ride(location=Location.JINJA),
        ))
        assert change.impact == Impact.IMPROVED
