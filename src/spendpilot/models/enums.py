"""
SpendPilot Enumerations

All enumeration types used throughout the SpendPilot system.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
The enum value is the wire value; ``label`` is the human-facing text.
"""
from __future__ import annotations

from enum import Enum


class _Labelled(str, Enum):
    """String enum with an optional human label table."""

    @property
    def label(self) -> str:
        return _LABELS.get((type(self), self.value), self.value)


# =============================================================================
# Scenario Fields
# =============================================================================

class ModuleKey(_Labelled):
    """Spend module a transaction belongs to."""
    RIDES = "Rides"
    ECOMMERCE = "ECommerce"
    EVS = "EVs"
    OTHER = "Other"


class Payment(_Labelled):
    """Payment instrument selected for the transaction."""
    CORPORATE_PAY = "CorporatePay"
    PERSONAL = "Personal"


class Location(_Labelled):
    """Where the transaction takes place."""
    KAMPALA = "Kampala"
    ENTEBBE = "Entebbe"
    JINJA = "Jinja"
    OTHER = "Other"


class RideCategory(_Labelled):
    """Ride service tier."""
    STANDARD = "Standard"
    PREMIUM = "Premium"
    LUXURY = "Luxury"


class Marketplace(_Labelled):
    """E-commerce marketplace."""
    MY_LIVE_DEALZ = "MyLiveDealz"
    EVMART = "EVmart"
    SERVICE_MART = "ServiceMart"
    OTHER = "Other"


class PurchaseCategory(_Labelled):
    """E-commerce purchase category."""
    OFFICE_SUPPLIES = "OfficeSupplies"
    ELECTRONICS = "Electronics"
    VEHICLES = "Vehicles"
    CATERING = "Catering"
    MEDICAL = "Medical"
    RESTRICTED = "Restricted"


class Station(_Labelled):
    """EV charging station."""
    KAMPALA_CBD = "KampalaCBD"
    ENTEBBE = "Entebbe"
    OTHER = "Other"


# =============================================================================
# Decision Types
# =============================================================================

class ReasonCode(_Labelled):
    """
    Closed set of reasons a policy rule can fire.

    CAP and PROGRAM are reserved for program-level rules; no module
    evaluator raises them today.
    """
    GEO = "GEO"
    TIME = "TIME"
    VENDOR = "VENDOR"
    CATEGORY = "CATEGORY"
    BASKET = "BASKET"
    STATION = "STATION"
    THRESHOLD = "THRESHOLD"
    CAP = "CAP"
    PROGRAM = "PROGRAM"
    OK = "OK"


class Outcome(_Labelled):
    """Verdict of a policy check."""
    ALLOWED = "Allowed"
    APPROVAL_REQUIRED = "ApprovalRequired"
    BLOCKED = "Blocked"


class Impact(_Labelled):
    """Policy impact of a single changed scenario field."""
    IMPROVED = "Improved"
    WORSE = "Worse"
    NEUTRAL = "Neutral"


class NextStep(_Labelled):
    """Primary call to action following a decision."""
    CONTINUE_PERSONAL = "ContinuePersonal"
    CONTINUE_CORPORATE = "ContinueCorporate"
    SUBMIT_FOR_APPROVAL = "SubmitForApproval"
    REQUEST_EXCEPTION = "RequestException"


_LABELS: dict[tuple[type, str], str] = {
    (ModuleKey, ModuleKey.RIDES.value): "Rides & Logistics",
    (ModuleKey, ModuleKey.ECOMMERCE.value): "E-Commerce",
    (ModuleKey, ModuleKey.EVS.value): "EVs & Charging",
    (PurchaseCategory, PurchaseCategory.OFFICE_SUPPLIES.value): "Office supplies",
    (Station, Station.KAMPALA_CBD.value): "Kampala CBD",
    (Outcome, Outcome.APPROVAL_REQUIRED.value): "Approval required",
    (NextStep, NextStep.CONTINUE_PERSONAL.value): "Continue (Personal)",
    (NextStep, NextStep.CONTINUE_CORPORATE.value): "Continue (CorporatePay)",
    (NextStep, NextStep.SUBMIT_FOR_APPROVAL.value): "Submit for approval",
    (NextStep, NextStep.REQUEST_EXCEPTION.value): "Request exception",
}
