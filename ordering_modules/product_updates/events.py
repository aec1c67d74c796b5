"""
Product update notifications.

``ProductUpdateApproved`` is published after an approval is committed so
that the catalog owner can apply ``request.proposed_data``.  The ordering
core itself never writes to the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass

from ordering_modules.product_updates.models import ProductUpdateRequest


@dataclass(frozen=True)
class ProductUpdateApproved:
    request: ProductUpdateRequest
