"""ORM Models — SQLAlchemy declarative models for users and handshakes.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the only parent; a Handshake references exactly one User

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata holds both tables for
      create_all and Alembic autogenerate
    - No ORM relationships: handshakes join users through explicit user_id queries
"""

from shaker.models.user import User  # noqa: F401
from shaker.models.handshake import Handshake  # noqa: F401
