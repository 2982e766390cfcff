"""Services — imperative shell around the pure core.

Invariants:
    - Services own all reads and writes against an AsyncSession
    - Decisions about identity changes come from core/identity_rules.py

Design Decisions:
    - Classes take the AsyncSession in __init__; one instance per request
"""
