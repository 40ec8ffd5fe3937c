"""
Persistence adapters.

These modules encapsulate how data is stored/retrieved. Services depend on the
repository methods (and on the TokenSaver contract) rather than on sessions.
"""
