"""
Canonical workflow types (``ordering_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for workflow state machines.  Used by the order
lifecycle and the product-update approval flow so that Guard, Transition,
and Workflow are defined once.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``services/``, or outer layers.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* Terminal states are exactly the states with no outgoing transition.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Guard:
    """A condition that must be satisfied before a transition fires.

    Descriptive only; the owning service evaluates it.
    """
    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow."""
    from_state: str
    to_state: str
    action: str
    guard: Guard | None = None


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle."""
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"{self.name}: initial_state '{self.initial_state}' not in states"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"{self.name}: transition {t.action} references unknown state"
                )

    def allowed_targets(self, from_state: str) -> frozenset[str]:
        """States reachable from ``from_state`` in one transition."""
        return frozenset(
            t.to_state for t in self.transitions if t.from_state == from_state
        )

    def find_transition(self, from_state: str, to_state: str) -> Transition | None:
        for t in self.transitions:
            if t.from_state == from_state and t.to_state == to_state:
                return t
        return None

    @property
    def terminal_states(self) -> frozenset[str]:
        sources = {t.from_state for t in self.transitions}
        return frozenset(s for s in self.states if s not in sources)
