"""
SpendPilot Policy Pack Loader

Loads and validates policy packs from YAML or JSON files.

Converts Pydantic schema models to the PolicyConfig dataclasses.
"""
from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ValidationError

from ..config import (
    ChargingPolicy,
    ECommercePolicy,
    OtherPolicy,
    PolicyConfig,
    RidesPolicy,
)
from ..exceptions import PolicyLoadError, PolicyValidationError, PolicyVersionMismatch
from ..models import Location, Marketplace, PurchaseCategory, RideCategory, Station, minutes_of_day
from .schema import (
    SCHEMA_VERSION,
    ChargingSchema,
    ECommerceSchema,
    OtherSchema,
    PolicyPackSchema,
    RidesSchema,
    check_schema_version,
    validate_policy_pack,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Schema to Config Converters
# =============================================================================

def _overrides(schema: BaseModel, enum_fields: dict[str, type]) -> dict[str, Any]:
    """Collect the fields a pack section sets, converted to config types."""
    result: dict[str, Any] = {}
    for name, value in schema.model_dump(exclude_none=True).items():
        enum_type = enum_fields.get(name)
        if enum_type is None:
            result[name] = value
        elif isinstance(value, list):
            result[name] = tuple(enum_type(v) for v in value)
        else:
            result[name] = enum_type(value)
    return result


def _convert_rides(schema: RidesSchema) -> RidesPolicy:
    return replace(RidesPolicy(), **_overrides(schema, {
        "allowed_locations": Location,
        "blocked_categories": RideCategory,
        "approval_categories": RideCategory,
        "suggested_location": Location,
    }))


def _convert_ecommerce(schema: ECommerceSchema) -> ECommercePolicy:
    return replace(ECommercePolicy(), **_overrides(schema, {
        "restricted_categories": PurchaseCategory,
        "fallback_category": PurchaseCategory,
        "threshold_marketplaces": Marketplace,
        "alternate_marketplace": Marketplace,
    }))


def _convert_charging(schema: ChargingSchema) -> ChargingPolicy:
    return replace(ChargingPolicy(), **_overrides(schema, {
        "approved_stations": Station,
        "suggested_station": Station,
    }))


def _convert_other(schema: OtherSchema) -> OtherPolicy:
    return replace(OtherPolicy(), **_overrides(schema, {}))


def _convert_policy_pack(schema: PolicyPackSchema) -> PolicyConfig:
    """Convert a validated PolicyPackSchema to a PolicyConfig."""
    top = {
        k: v for k, v in (
            ("name", schema.name),
            ("version", schema.version),
            ("currency", schema.currency),
        )
        if v is not None
    }
    return PolicyConfig(
        rides=_convert_rides(schema.rides),
        ecommerce=_convert_ecommerce(schema.ecommerce),
        charging=_convert_charging(schema.charging),
        other=_convert_other(schema.other),
        **top,
    )


# (section, threshold field, limit field); each threshold rule only fires below its limit
_THRESHOLD_LIMITS: tuple[tuple[str, str, str], ...] = (
    ("rides", "approval_threshold", "trip_limit"),
    ("charging", "approval_threshold", "session_limit"),
    ("other", "approval_threshold", "rfq_limit"),
)


def _limit_errors(config: PolicyConfig) -> list[dict[str, Any]]:
    """Bounds that are out of order once the defaults are merged in."""
    errors = []
    rides = config.rides
    if minutes_of_day(rides.window_start) > minutes_of_day(rides.window_end):
        errors.append({
            "loc": ("rides", "window_start"),
            "msg": f"window_start ({rides.window_start}) must not be after window_end ({rides.window_end})",
        })
    for section, threshold_field, limit_field in _THRESHOLD_LIMITS:
        rules = getattr(config, section)
        threshold = getattr(rules, threshold_field)
        limit = getattr(rules, limit_field)
        if threshold > limit:
            errors.append({
                "loc": (section, threshold_field),
                "msg": f"{threshold_field} ({threshold}) must not exceed {limit_field} ({limit})",
            })
    return errors


# =============================================================================
# Policy Pack Loader
# =============================================================================

class PolicyPackLoader:
    """
    Loads policy packs from YAML or JSON files.

    Usage:
        loader = PolicyPackLoader()
        config = loader.load("packs/corporate_default.yaml")
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.strict_version = strict_version

    def load(self, path: Union[str, Path]) -> PolicyConfig:
        """
        Load a policy pack from a file.

        Args:
            path: Path to YAML or JSON file

        Returns:
            PolicyConfig with the pack's overrides applied

        Raises:
            PolicyLoadError: If file cannot be read
            PolicyValidationError: If validation fails
            PolicyVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise PolicyLoadError(
                message=f"Failed to load policy pack: {e}",
                details={"path": str(path), "error": str(e)},
            )

        config = self.load_data(data, source=str(path))
        logger.info(
            "Loaded policy pack %s (%s v%s) fingerprint=%s",
            path, config.name, config.version, config.fingerprint()[:16],
        )
        return config

    def load_data(self, data: Any, source: str = "<memory>") -> PolicyConfig:
        """Validate already-parsed pack data and convert it."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise PolicyValidationError(
                message="Policy pack must be a mapping",
                details={"path": source, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise PolicyVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": str(pack_version),
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            schema = validate_policy_pack(data)
        except ValidationError as e:
            raise PolicyValidationError(
                message=f"Policy pack validation failed: {e.error_count()} errors",
                details={
                    "errors": e.errors(include_url=False, include_context=False),
                    "path": source,
                },
            )

        config = _convert_policy_pack(schema)
        errors = _limit_errors(config)
        if errors:
            raise PolicyValidationError(
                message=f"Policy pack validation failed: {len(errors)} errors",
                details={"errors": errors, "path": source},
            )
        return config

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f)
            elif path.suffix.lower() == ".json":
                return json.load(f)
            else:
                # Try YAML first, then JSON
                content = f.read()
                try:
                    return yaml.safe_load(content)
                except yaml.YAMLError:
                    return json.loads(content)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_policy_pack(path: Union[str, Path]) -> PolicyConfig:
    """
    Load a policy pack from a file.

    Convenience function that creates a temporary loader.
    """
    return PolicyPackLoader().load(path)


def load_policy_pack_from_string(content: str, format: str = "yaml") -> PolicyConfig:
    """
    Load a policy pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    if format.lower() == "json":
        data = json.loads(content)
    else:
        data = yaml.safe_load(content)
    return PolicyPackLoader().load_data(data)
