"""
Account model: a bank account owned by an AccountHolder.

Maps the legacy `cuentabancaria` table.

Balance management:
  `balance` is the source of truth for an account's funds. It is never
  recomputed from movements; execute_transaction() reads it, checks it,
  and writes the new value back, then records the movement.

Why Decimal?
  Amounts come from the ledger as DECIMAL columns and are carried as
  decimal.Decimal end to end, so 0.1 + 0.2 is exactly 0.3.
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.database import Base


class Account(Base):
    __tablename__ = "cuentabancaria"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Owner of this account
    holder_id: Mapped[int] = mapped_column(
        "titular_id",
        ForeignKey("personanatural.id"),
        nullable=False,
        index=True,
    )

    balance: Mapped[Decimal] = mapped_column(
        "saldo",
        Numeric(18, 2),
        nullable=False,
        default=Decimal("0"),
    )

    # --- Relationships ---
    holder: Mapped["AccountHolder"] = relationship(
        back_populates="accounts",
    )
