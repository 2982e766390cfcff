"""API Layer — FastAPI routes, auth dependency and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Counts and name lists are plain text; records are JSON

Design Decisions:
    - Thin routes delegate to services
"""
