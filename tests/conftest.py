"""
Pytest configuration and fixtures for SpendPilot tests.

Provides scenario factories for each module and a shared engine.
"""
import pytest

from spendpilot.config import PolicyConfig
from spendpilot.engine import SpendPolicyEngine
from spendpilot.models import (
    Location,
    Marketplace,
    ModuleKey,
    Payment,
    PurchaseCategory,
    RideCategory,
    Scenario,
    Station,
)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_scenario(
    module: ModuleKey = ModuleKey.OTHER,
    payment: Payment = Payment.CORPORATE_PAY,
    amount: int = 100_000,
    time_of_day: str = "10:00",
    location: Location = Location.KAMPALA,
    **module_fields,
) -> Scenario:
    """Create a Scenario with required fields."""
    return Scenario(
        module=module,
        payment=payment,
        amount=amount,
        time_of_day=time_of_day,
        location=location,
        **module_fields,
    )


def make_ride(
    amount: int = 160_000,
    time_of_day: str = "09:30",
    location: Location = Location.KAMPALA,
    ride_category: RideCategory = RideCategory.STANDARD,
    payment: Payment = Payment.CORPORATE_PAY,
) -> Scenario:
    """Create a Rides scenario; defaults are within policy."""
    return make_scenario(
        module=ModuleKey.RIDES,
        payment=payment,
        amount=amount,
        time_of_day=time_of_day,
        location=location,
        ride_category=ride_category,
    )


def make_purchase(
    amount: int = 250_000,
    marketplace: Marketplace = Marketplace.EVMART,
    vendor_approved: bool = True,
    category: PurchaseCategory = PurchaseCategory.OFFICE_SUPPLIES,
    payment: Payment = Payment.CORPORATE_PAY,
) -> Scenario:
    """Create an E-Commerce scenario; defaults are within policy."""
    return make_scenario(
        module=ModuleKey.ECOMMERCE,
        payment=payment,
        amount=amount,
        marketplace=marketplace,
        vendor_approved=vendor_approved,
        category=category,
    )


def make_charge(
    amount: int = 100_000,
    station: Station = Station.KAMPALA_CBD,
    payment: Payment = Payment.CORPORATE_PAY,
) -> Scenario:
    """Create an EVs & Charging scenario; defaults are within policy."""
    return make_scenario(
        module=ModuleKey.EVS,
        payment=payment,
        amount=amount,
        station=station,
    )


def scenario_a() -> dict:
    """Standard daytime ride in Kampala (wire format)."""
    return {
        "module": "Rides",
        "payment": "CorporatePay",
        "amount": 160000,
        "timeOfDay": "09:30",
        "location": "Kampala",
        "rideCategory": "Standard",
    }


def scenario_b() -> dict:
    """Large MyLiveDealz basket from an unapproved vendor (wire format)."""
    return {
        "module": "ECommerce",
        "payment": "CorporatePay",
        "amount": 1250000,
        "timeOfDay": "10:00",
        "location": "Kampala",
        "marketplace": "MyLiveDealz",
        "vendorApproved": False,
        "category": "OfficeSupplies",
    }


def alt_ids(decision) -> list[str]:
    return [a.id for a in decision.alternatives]


def tip_ids(decision) -> list[str]:
    return [c.id for c in decision.coach]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config() -> PolicyConfig:
    return PolicyConfig()


@pytest.fixture
def engine(config) -> SpendPolicyEngine:
    return SpendPolicyEngine(config)
