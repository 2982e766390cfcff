"""Infrastructure Layer — store access, migrations and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every driver failure leaves this layer as a StoreError

Design Decisions:
    - Session manager is an owned object handed to callers, not a module global
"""
