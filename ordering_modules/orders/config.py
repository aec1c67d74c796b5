"""
Orders Configuration Schema.

Defines the structure and defaults for order settings.  Actual values come
from the active ``PlatformConfig`` at composition time.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self

from ordering_kernel.logging_config import get_logger

logger = get_logger("modules.orders.config")

VALID_TRANSITION_POLICIES = {"strict", "permissive"}


@dataclass
class OrdersConfig:
    """
    Configuration schema for the orders module.

        config = OrdersConfig(vat_rate=Decimal("0.055"))

    ``status_transition_policy``:
        strict      -- only transitions in ORDER_WORKFLOW are allowed.
        permissive  -- any status may be set from any status.
    """

    vat_rate: Decimal = Decimal("0.20")
    status_transition_policy: str = "strict"

    def __post_init__(self):
        if not (Decimal("0") <= self.vat_rate < Decimal("1")):
            raise ValueError(f"vat_rate must be in [0, 1), got {self.vat_rate}")
        if self.status_transition_policy not in VALID_TRANSITION_POLICIES:
            raise ValueError(
                f"status_transition_policy must be one of {VALID_TRANSITION_POLICIES}, "
                f"got '{self.status_transition_policy}'"
            )
        logger.info(
            "orders_config_initialized",
            extra={
                "vat_rate": str(self.vat_rate),
                "status_transition_policy": self.status_transition_policy,
            },
        )

    @property
    def is_strict(self) -> bool:
        return self.status_transition_policy == "strict"

    @classmethod
    def with_defaults(cls) -> Self:
        return cls()
