# app/models/__init__.py
from app.db.base import Base  # noqa: F401

from . import account     # noqa: F401
from . import credential  # noqa: F401
