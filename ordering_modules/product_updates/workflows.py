"""
Product Update Workflows.

Approval state machine for update requests.  Review is a single step:
a pending request is approved or rejected, and both outcomes are final.
"""

from ordering_kernel.domain.workflow import Guard, Transition, Workflow
from ordering_kernel.logging_config import get_logger

logger = get_logger("modules.product_updates.workflows")

REJECTION_REASON_GIVEN = Guard(
    name="rejection_reason_given",
    description="A non-empty rejection reason was supplied",
)

PRODUCT_UPDATE_WORKFLOW = Workflow(
    name="product_update",
    description="Review of a supplier-proposed catalog change",
    initial_state="pending",
    states=("pending", "approved", "rejected"),
    transitions=(
        Transition("pending", "approved", action="approve"),
        Transition("pending", "rejected", action="reject", guard=REJECTION_REASON_GIVEN),
    ),
)

logger.info(
    "product_update_workflow_registered",
    extra={
        "workflow_name": PRODUCT_UPDATE_WORKFLOW.name,
        "state_count": len(PRODUCT_UPDATE_WORKFLOW.states),
        "transition_count": len(PRODUCT_UPDATE_WORKFLOW.transitions),
    },
)
