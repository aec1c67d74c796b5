"""
Configuration Loader (``ordering_config.loader``).

Responsibility
--------------
Loads the YAML fragment files of a configuration set and parses them into
the frozen dataclasses of ``ordering_config.schema``.  Build/test tooling:
runtime callers go through ``ordering_config.get_active_config()``.

Configuration set layout::

    sets/<name>/
    +-- root.yaml                  # identity, tax, ledger and workflow settings
    +-- shipping.yaml              # supplier tier schedules (optional)
    +-- supplier_references.yaml   # client references per supplier (optional)

Failure modes
-------------
* Missing root.yaml  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Non-numeric amounts  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from ordering_config.schema import (
    PlatformConfig,
    ShippingScheduleDef,
    ShippingTierDef,
    SupplierReferenceDef,
)
from ordering_kernel.domain.values import to_decimal


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file and return its contents as a dict (empty if the file is empty)."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _optional_decimal(value: Any):
    return None if value is None else to_decimal(value)


def parse_tier(data: dict[str, Any]) -> ShippingTierDef:
    return ShippingTierDef(
        min_amount=to_decimal(data["min_amount"]),
        max_amount=_optional_decimal(data.get("max_amount")),
        shipping_cost=to_decimal(data["shipping_cost"]),
    )


def parse_schedule(data: dict[str, Any]) -> ShippingScheduleDef:
    return ShippingScheduleDef(
        supplier_id=str(data["supplier_id"]),
        supplier_name=data.get("supplier_name", str(data["supplier_id"])),
        tiers=tuple(parse_tier(t) for t in data.get("tiers", [])),
    )


def parse_supplier_reference(data: dict[str, Any]) -> SupplierReferenceDef:
    return SupplierReferenceDef(
        client_id=str(data["client_id"]),
        supplier_id=str(data["supplier_id"]),
        client_reference=str(data["client_reference"]),
        preferred_delivery_days=tuple(data.get("preferred_delivery_days", [])),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization; identical data, identical checksum."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_platform_config(
    root: dict[str, Any],
    shipping: dict[str, Any] | None = None,
    references: dict[str, Any] | None = None,
) -> PlatformConfig:
    """Build a ``PlatformConfig`` from already-loaded fragment dicts."""
    shipping = shipping or {}
    references = references or {}
    orders = root.get("orders", {})
    inventory = root.get("inventory", {})
    return PlatformConfig(
        config_id=root["config_id"],
        version=int(root.get("version", 1)),
        currency=root.get("currency", "EUR"),
        vat_rate=to_decimal(root["vat_rate"]),
        default_alert_threshold=to_decimal(inventory.get("default_alert_threshold", 5)),
        status_transition_policy=orders.get("status_transition_policy", "strict"),
        max_shipping_tiers=int(root.get("max_shipping_tiers", 4)),
        transaction_actor=inventory.get("transaction_actor", "system"),
        database_url=root.get("database_url"),
        shipping_schedules=tuple(
            parse_schedule(s) for s in shipping.get("schedules", [])
        ),
        supplier_references=tuple(
            parse_supplier_reference(r) for r in references.get("references", [])
        ),
        checksum=compute_checksum(
            {"root": root, "shipping": shipping, "references": references}
        ),
    )


def assemble_from_directory(directory: Path) -> PlatformConfig:
    """Load every fragment of the configuration set in ``directory``."""
    root = load_yaml_file(directory / "root.yaml")
    shipping_file = directory / "shipping.yaml"
    references_file = directory / "supplier_references.yaml"
    return parse_platform_config(
        root,
        load_yaml_file(shipping_file) if shipping_file.exists() else None,
        load_yaml_file(references_file) if references_file.exists() else None,
    )
