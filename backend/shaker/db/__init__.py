"""Database Infrastructure — SQLAlchemy declarative Base shared by all ORM models.

Invariants:
    - Single async engine per DatabaseSessionManager (infrastructure/database.py)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite driver: the store is a local SQLite file
"""
