"""
SpendPilot Policy Pack Schemas

Pydantic models for validating policy pack YAML/JSON files.

These schemas define the structure of policy packs that can be loaded
at runtime. They map to the dataclasses in spendpilot.config.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders should check version compatibility

Every section and every field is optional; omitted values keep the
stock program defaults.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

LocationValue = Literal["Kampala", "Entebbe", "Jinja", "Other"]

RideCategoryValue = Literal["Standard", "Premium", "Luxury"]

MarketplaceValue = Literal["MyLiveDealz", "EVmart", "ServiceMart", "Other"]

PurchaseCategoryValue = Literal[
    "OfficeSupplies", "Electronics", "Vehicles", "Catering", "Medical", "Restricted"
]

StationValue = Literal["KampalaCBD", "Entebbe", "Other"]

NonNegative = Annotated[int, Field(ge=0)]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


def _check_hhmm(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parts = value.split(":")
    if (
        len(parts) != 2
        or len(parts[0]) != 2
        or len(parts[1]) != 2
        or not parts[0].isdigit()
        or not parts[1].isdigit()
        or int(parts[0]) > 23
        or int(parts[1]) > 59
    ):
        raise ValueError(f"expected HH:MM, got {value!r}")
    return value


# =============================================================================
# Module Sections
# =============================================================================

class RidesSchema(_Section):
    """Schema for the rides section."""
    window_start: Optional[str] = Field(None, description="Earliest allowed HH:MM")
    window_end: Optional[str] = Field(None, description="Latest allowed HH:MM")
    allowed_locations: Optional[list[LocationValue]] = None
    blocked_categories: Optional[list[RideCategoryValue]] = None
    approval_categories: Optional[list[RideCategoryValue]] = None
    trip_limit: Optional[NonNegative] = None
    approval_threshold: Optional[NonNegative] = None
    suggested_time: Optional[str] = None
    suggested_location: Optional[LocationValue] = None
    reduced_trip_amount: Optional[NonNegative] = None
    under_threshold_amount: Optional[NonNegative] = None

    @field_validator("window_start", "window_end", "suggested_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_hhmm(v)


class ECommerceSchema(_Section):
    """Schema for the ecommerce section."""
    restricted_categories: Optional[list[PurchaseCategoryValue]] = None
    fallback_category: Optional[PurchaseCategoryValue] = None
    unapproved_vendor_limit: Optional[NonNegative] = None
    rfq_amount: Optional[NonNegative] = None
    threshold_marketplaces: Optional[list[MarketplaceValue]] = None
    marketplace_threshold: Optional[NonNegative] = None
    under_threshold_amount: Optional[NonNegative] = None
    alternate_marketplace: Optional[MarketplaceValue] = None
    basket_limit: Optional[NonNegative] = None
    split_amount: Optional[NonNegative] = None


class ChargingSchema(_Section):
    """Schema for the charging section."""
    approved_stations: Optional[list[StationValue]] = None
    suggested_station: Optional[StationValue] = None
    session_limit: Optional[NonNegative] = None
    approval_threshold: Optional[NonNegative] = None
    reduced_amount: Optional[NonNegative] = None


class OtherSchema(_Section):
    """Schema for the catch-all module section."""
    rfq_limit: Optional[NonNegative] = None
    rfq_amount: Optional[NonNegative] = None
    approval_threshold: Optional[NonNegative] = None
    under_threshold_amount: Optional[NonNegative] = None


# =============================================================================
# Policy Pack
# =============================================================================

class PolicyPackSchema(BaseModel):
    """Top-level schema of a policy pack file."""
    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(SCHEMA_VERSION, description="Pack schema version")
    name: Optional[str] = Field(None, description="Program name")
    version: Optional[str] = Field(None, description="Program version")
    currency: Optional[str] = Field(None, min_length=1, description="Currency label")

    rides: RidesSchema = Field(default_factory=RidesSchema)
    ecommerce: ECommerceSchema = Field(default_factory=ECommerceSchema)
    charging: ChargingSchema = Field(default_factory=ChargingSchema)
    other: OtherSchema = Field(default_factory=OtherSchema)


def validate_policy_pack(data: dict[str, Any]) -> PolicyPackSchema:
    """
    Validate raw pack data.

    Raises:
        pydantic.ValidationError: If the data does not match the schema
    """
    return PolicyPackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """
    Check if a policy pack's schema version is compatible.

    Args:
        data: Dictionary with schema_version field

    Returns:
        True if compatible, False otherwise
    """
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    pack_major = pack_version.split(".")[0]
    current_major = SCHEMA_VERSION.split(".")[0]
    return pack_major == current_major
