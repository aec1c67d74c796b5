"""
ordering_config -- single public entrypoint for platform configuration.

Responsibility:
    ``get_active_config()`` is the only way runtime code obtains
    configuration.  YAML loading is internal tooling.

Architecture position:
    Configuration sits above ``ordering_kernel`` and below
    ``ordering_services``.  The kernel MUST NEVER import from
    ``ordering_config``; the platform facade translates a
    ``PlatformConfig`` into module config objects.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the requested name.
    - ``ValueError`` -- schema validation failures.

Audit relevance:
    Every successful call emits an ``ORDERING_CONFIG_TRACE`` record with the
    config_id, version and checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ordering_config.loader import assemble_from_directory
from ordering_config.schema import (
    PlatformConfig,
    ShippingScheduleDef,
    ShippingTierDef,
    SupplierReferenceDef,
)

_logger = logging.getLogger("ordering_kernel.config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    config_name: str = "default",
    config_dir: Path | None = None,
) -> PlatformConfig:
    """
    The ONLY public configuration entrypoint.

    Args:
        config_name: Name of the configuration set subdirectory.
        config_dir: Directory holding configuration sets; defaults to the
            bundled ``sets/`` directory.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    set_dir = sets_dir / config_name
    if not (set_dir / "root.yaml").exists():
        raise FileNotFoundError(
            f"No configuration set '{config_name}' in {sets_dir}"
        )

    config = assemble_from_directory(set_dir)
    _logger.info(
        "ORDERING_CONFIG_TRACE",
        extra={
            "trace_type": "ORDERING_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "shipping_schedule_count": len(config.shipping_schedules),
        },
    )
    return config


__all__ = [
    "get_active_config",
    "PlatformConfig",
    "ShippingScheduleDef",
    "ShippingTierDef",
    "SupplierReferenceDef",
]
