"""Root conftest — shared test configuration."""

import os

# Never pick up a developer's real database or token
os.environ.setdefault("SHAKER_DB", "test.db")
os.environ.pop("SHAKER_TOKEN", None)
os.environ.pop("SHAKER_IMPORT", None)
