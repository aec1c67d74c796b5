"""
Ordering modules.

Each subpackage owns one aggregate of the ordering core and follows the
same layout: ``models`` (frozen DTOs), ``config`` (validated settings),
``workflows`` (state machines), ``service`` (stateful orchestration) and
``orm`` (SQLAlchemy persistence models).

Modules import from ``ordering_kernel`` and ``ordering_engines`` only.
The order and inventory modules never import each other.
"""
