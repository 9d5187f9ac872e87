"""
SpendPilot Policy Packs

YAML/JSON files that override the stock policy thresholds and allow-lists.
"""
from __future__ import annotations

from .loader import (
    PolicyPackLoader,
    load_policy_pack,
    load_policy_pack_from_string,
)
from .schema import SCHEMA_VERSION, PolicyPackSchema, check_schema_version

__all__ = [
    "SCHEMA_VERSION",
    "PolicyPackLoader",
    "PolicyPackSchema",
    "check_schema_version",
    "load_policy_pack",
    "load_policy_pack_from_string",
]
