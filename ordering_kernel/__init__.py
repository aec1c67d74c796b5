"""
Ordering Kernel

Shared foundation for the B2B ordering core:
- Structured logging and typed exceptions
- Injectable clock and Decimal amount helpers
- Workflow state-machine types
- Read-only catalog adapter protocol
- Synchronous notification bus
- SQLAlchemy declarative base and engine management
"""

__version__ = "0.1.0"
