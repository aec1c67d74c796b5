"""
Typed Exception Hierarchy for the Ordering Kernel.

Every error the core can raise has its own class, a machine-readable
``code`` class attribute, and the structured data needed to act on it.
Callers catch by type and read attributes; they never parse messages.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    OrderingKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidShippingScheduleError
    |
    +-- CatalogError
    |   +-- ProductNotFoundError
    |
    +-- InventoryError
    |   +-- InsufficientStockError
    |   +-- AlertNotFoundError
    |
    +-- OrderError
    |   +-- EmptySupplierGroupError
    |   +-- OrderNotFoundError
    |   +-- OrderLineNotFoundError
    |   +-- OrderNotReceivableError
    |
    +-- WorkflowError
    |   +-- InvalidStatusTransitionError
    |
    +-- ProductUpdateError
        +-- UpdateRequestNotFoundError
        +-- ImportBatchNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | VALIDATION_ERROR            | Bad command input (quantity, reason)
                | INVALID_SHIPPING_SCHEDULE   | Malformed tier schedule
----------------|-----------------------------|-----------------------------------------
Catalog         | PRODUCT_NOT_FOUND           | Product unknown to ledger and catalog
----------------|-----------------------------|-----------------------------------------
Inventory       | INSUFFICIENT_STOCK          | Stock-out larger than current stock
                | ALERT_NOT_FOUND             | Acknowledging an unknown alert
----------------|-----------------------------|-----------------------------------------
Order           | EMPTY_SUPPLIER_GROUP        | Cart group with no lines (skipped)
                | ORDER_NOT_FOUND             | Order id unknown
                | ORDER_LINE_NOT_FOUND        | Product not on the order
                | ORDER_NOT_RECEIVABLE        | Reception on a cancelled order
----------------|-----------------------------|-----------------------------------------
Workflow        | INVALID_STATUS_TRANSITION   | Transition absent from the state table
----------------|-----------------------------|-----------------------------------------
Product update  | UPDATE_REQUEST_NOT_FOUND    | Request id unknown
                | IMPORT_BATCH_NOT_FOUND      | Batch id unknown

Ledger failures (PRODUCT_NOT_FOUND, INSUFFICIENT_STOCK) are raised inside the
ledger and converted to a failed ``StockMovementResult`` at its public
boundary; they never propagate into the notification pipeline.
"""


class OrderingKernelError(Exception):
    """
    Base exception for all ordering kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "ORDERING_KERNEL_ERROR"


# Validation


class ValidationError(OrderingKernelError):
    """Command input rejected at the boundary."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class InvalidShippingScheduleError(ValidationError):
    """A supplier tier schedule is malformed."""

    code: str = "INVALID_SHIPPING_SCHEDULE"

    def __init__(self, supplier_id: str, reason: str):
        self.supplier_id = supplier_id
        super().__init__("shipping_schedule", f"{supplier_id}: {reason}")


# Catalog


class CatalogError(OrderingKernelError):
    """Base exception for catalog lookups."""

    code: str = "CATALOG_ERROR"


class ProductNotFoundError(CatalogError):
    """Product has no ledger entry and no catalog record."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


# Inventory


class InventoryError(OrderingKernelError):
    """Base exception for inventory ledger errors."""

    code: str = "INVENTORY_ERROR"


class InsufficientStockError(InventoryError):
    """Requested stock-out exceeds current stock."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: str, available: str):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_id}: "
            f"requested {requested}, available {available}"
        )


class AlertNotFoundError(InventoryError):
    """Alert with given ID was not found."""

    code: str = "ALERT_NOT_FOUND"

    def __init__(self, alert_id: str):
        self.alert_id = alert_id
        super().__init__(f"Alert not found: {alert_id}")


# Orders


class OrderError(OrderingKernelError):
    """Base exception for order aggregate errors."""

    code: str = "ORDER_ERROR"


class EmptySupplierGroupError(OrderError):
    """
    Cart group for a supplier contains no lines.

    Benign: order creation skips the group instead of failing.
    """

    code: str = "EMPTY_SUPPLIER_GROUP"

    def __init__(self, supplier_id: str):
        self.supplier_id = supplier_id
        super().__init__(f"No cart lines for supplier {supplier_id}")


class OrderNotFoundError(OrderError):
    """Order with given ID was not found."""

    code: str = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class OrderLineNotFoundError(OrderError):
    """Order has no line for the given product."""

    code: str = "ORDER_LINE_NOT_FOUND"

    def __init__(self, order_id: str, product_id: str):
        self.order_id = order_id
        self.product_id = product_id
        super().__init__(f"Order {order_id} has no line for product {product_id}")


class OrderNotReceivableError(OrderError):
    """Reception attempted on an order that cannot receive goods."""

    code: str = "ORDER_NOT_RECEIVABLE"

    def __init__(self, order_id: str, status: str):
        self.order_id = order_id
        self.status = status
        super().__init__(f"Order {order_id} cannot be received in status '{status}'")


# Workflow


class WorkflowError(OrderingKernelError):
    """Base exception for state machine errors."""

    code: str = "WORKFLOW_ERROR"


class InvalidStatusTransitionError(WorkflowError):
    """Requested transition is not in the workflow's transition table."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, workflow: str, entity_id: str, from_state: str, to_state: str):
        self.workflow = workflow
        self.entity_id = entity_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"{workflow}: cannot move {entity_id} from '{from_state}' to '{to_state}'"
        )


# Product updates


class ProductUpdateError(OrderingKernelError):
    """Base exception for product update workflow errors."""

    code: str = "PRODUCT_UPDATE_ERROR"


class UpdateRequestNotFoundError(ProductUpdateError):
    """Update request with given ID was not found."""

    code: str = "UPDATE_REQUEST_NOT_FOUND"

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Update request not found: {request_id}")


class ImportBatchNotFoundError(ProductUpdateError):
    """Import batch with given ID was not found."""

    code: str = "IMPORT_BATCH_NOT_FOUND"

    def __init__(self, batch_id: str):
        self.batch_id = batch_id
        super().__init__(f"Import batch not found: {batch_id}")
