"""
Inventory Configuration Schema.

Defines the structure and defaults for ledger settings.  Actual values come
from the active ``PlatformConfig`` at composition time.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self

from ordering_kernel.logging_config import get_logger

logger = get_logger("modules.inventory.config")


@dataclass
class InventoryConfig:
    """
    Configuration schema for the inventory module.

        config = InventoryConfig(default_alert_threshold=Decimal("10"))
    """

    # Threshold given to entries created from the catalog
    default_alert_threshold: Decimal = Decimal("5")

    # Recorded as created_by on every transaction
    transaction_actor: str = "system"

    def __post_init__(self):
        if self.default_alert_threshold < 0:
            raise ValueError("default_alert_threshold cannot be negative")
        if not self.transaction_actor:
            raise ValueError("transaction_actor is required")
        logger.info(
            "inventory_config_initialized",
            extra={
                "default_alert_threshold": str(self.default_alert_threshold),
                "transaction_actor": self.transaction_actor,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        return cls()
