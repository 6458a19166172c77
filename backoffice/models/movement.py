"""
Movement model: one deposit or withdrawal against an account.

Maps the legacy `movimientobancario` table. A movement is written once,
as the last step of a successful transaction, and never updated or
deleted afterwards.

Key fields:
  - kind: "deposito" (money in) or "retiro" (money out)
  - amount: never negative; the direction is implied by the kind
  - date: when the movement was recorded (UTC); month filters for
    statements and reports run against this column
"""

import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.database import Base


class MovementKind(str, enum.Enum):
    """
    Direction of a movement.

    Inherits from str so the value serializes naturally to JSON and is
    stored as the plain legacy string.
    """
    DEPOSIT = "deposito"
    WITHDRAWAL = "retiro"


class Movement(Base):
    __tablename__ = "movimientobancario"

    __table_args__ = (
        CheckConstraint("valor >= 0", name="ck_movimientobancario_non_negative_valor"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    account_id: Mapped[int] = mapped_column(
        "cuenta_bancaria_id",
        ForeignKey("cuentabancaria.id"),
        nullable=False,
        index=True,
    )

    # Indexed for the month-range queries
    date: Mapped[datetime] = mapped_column(
        "fecha",
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    # Stored as the raw legacy string ("deposito"/"retiro"), loaded as MovementKind
    kind: Mapped[MovementKind] = mapped_column(
        "tipo",
        Enum(
            MovementKind,
            native_enum=False,
            length=10,
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        "valor",
        Numeric(18, 2),
        nullable=False,
    )
