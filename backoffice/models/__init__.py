"""
SQLAlchemy ORM models package.

All models are imported here so that Base.metadata knows every table
and other modules can import from backoffice.models directly.
"""

from backoffice.models.account_holder import AccountHolder  # noqa: F401
from backoffice.models.account import Account  # noqa: F401
from backoffice.models.movement import Movement, MovementKind  # noqa: F401
