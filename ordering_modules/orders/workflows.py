"""
Order Workflows.

State machine for the order lifecycle.  ``ordered`` is the only state with
outgoing transitions; ``received`` and ``cancelled`` are terminal.
"""

from ordering_kernel.domain.workflow import Guard, Transition, Workflow
from ordering_kernel.logging_config import get_logger

logger = get_logger("modules.orders.workflows")

ALL_LINES_RECEIVED = Guard(
    name="all_lines_received",
    description="Every order line has been received (set when reception completes the order)",
)

ORDER_WORKFLOW = Workflow(
    name="order",
    description="Order lifecycle from checkout to reception or cancellation",
    initial_state="ordered",
    states=("ordered", "received", "cancelled"),
    transitions=(
        Transition("ordered", "received", action="receive", guard=ALL_LINES_RECEIVED),
        Transition("ordered", "cancelled", action="cancel"),
    ),
)

logger.info(
    "order_workflow_registered",
    extra={
        "workflow_name": ORDER_WORKFLOW.name,
        "state_count": len(ORDER_WORKFLOW.states),
        "transition_count": len(ORDER_WORKFLOW.transitions),
    },
)
