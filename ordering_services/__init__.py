"""
ordering_services -- cross-module services and the composition root.

Services here are the only code that sees several modules at once: the
reception bridge (orders -> inventory), the SQLAlchemy state store (every
module's ORM) and ``OrderingPlatform``, which wires them from a
``PlatformConfig``.
"""
