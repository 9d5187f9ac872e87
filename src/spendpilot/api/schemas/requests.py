"""Request schemas for the API."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScenarioInput(BaseModel):
    """
    A proposed transaction.

    Values, including the required ones, are passed through untouched and
    validated by the engine, so a missing or bad value is reported with the
    offending field name rather than coerced.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "module": "Rides",
                    "payment": "CorporatePay",
                    "amount": 160000,
                    "timeOfDay": "09:30",
                    "location": "Kampala",
                    "rideCategory": "Standard",
                },
                {
                    "module": "ECommerce",
                    "payment": "CorporatePay",
                    "amount": 1250000,
                    "timeOfDay": "10:00",
                    "location": "Kampala",
                    "marketplace": "MyLiveDealz",
                    "vendorApproved": False,
                    "category": "OfficeSupplies",
                },
            ]
        },
    )

    module: Optional[Any] = Field(None, description="Rides|ECommerce|EVs|Other")
    payment: Optional[Any] = Field(None, description="CorporatePay|Personal")
    amount: Optional[Any] = Field(None, description="Whole currency units, >= 0")
    time_of_day: Optional[Any] = Field(None, alias="timeOfDay", description="HH:MM, 24h")
    location: Optional[Any] = Field(None, description="Kampala|Entebbe|Jinja|Other")
    ride_category: Optional[Any] = Field(None, alias="rideCategory", description="Standard|Premium|Luxury")
    marketplace: Optional[Any] = Field(None, description="MyLiveDealz|EVmart|ServiceMart|Other")
    vendor_approved: Optional[Any] = Field(None, alias="vendorApproved")
    category: Optional[Any] = Field(
        None, description="OfficeSupplies|Electronics|Vehicles|Catering|Medical|Restricted"
    )
    station: Optional[Any] = Field(None, description="KampalaCBD|Entebbe|Other")

    def to_payload(self) -> dict[str, Any]:
        """Wire (camelCase) mapping for Scenario.from_dict."""
        return self.model_dump(by_alias=True, exclude_none=True)


class DiffRequest(BaseModel):
    """Two attempts to compare."""
    previous: ScenarioInput
    current: ScenarioInput


class ApplyRequest(BaseModel):
    """A scenario and the patch to apply to it."""
    scenario: ScenarioInput
    patch: dict[str, Any] = Field(..., description="camelCase field overrides")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "scenario": {
                        "module": "Rides",
                        "payment": "CorporatePay",
                        "amount": 280000,
                        "timeOfDay": "02:30",
                        "location": "Jinja",
                        "rideCategory": "Luxury",
                    },
                    "patch": {"timeOfDay": "09:00"},
                }
            ]
        }
    }
