"""
Ledger store: the only module that talks SQL.

LedgerStore wraps one AsyncSession and exposes the handful of reads and
writes the services need. Service functions receive a store as their
first argument, so a request works against its own session and tests
can pass a real store over an in-memory database or an AsyncMock.

Typed boundary:
  Methods return ORM instances or the small frozen row types defined
  below; raw Row objects never leave this module.

Error wrapping:
  Any SQLAlchemyError is re-raised as StoreError with a short context
  naming the operation, e.g. "Error al consultar saldo: <driver message>".

Month filters:
  "Month M of year Y" is the half-open range [first day of M, first day
  of M+1) in UTC, which works on every backend (no MONTH()/YEAR()).
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from backoffice.exceptions import StoreError
from backoffice.models.account import Account
from backoffice.models.account_holder import AccountHolder
from backoffice.models.movement import Movement, MovementKind


@dataclass(frozen=True)
class HolderMovementCount:
    """Number of movements made by one holder's accounts in a month."""
    holder_id: int
    transaction_count: int


@dataclass(frozen=True)
class HolderWithdrawalTotal:
    """Sum of one holder's qualifying withdrawals in a month."""
    holder_id: int
    total_amount: Decimal


def month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    """Return the [start, end) datetimes covering a calendar month in UTC."""
    month_start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        month_end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        month_end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return month_start, month_end


@contextmanager
def _store_errors(context: str):
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(context, exc) from exc


class LedgerStore:
    """Query interface over the accounts, holders and movements tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def get_account(self, account_id: int) -> Account | None:
        with _store_errors("Error al consultar saldo"):
            result = await self.session.execute(
                select(Account).where(Account.id == account_id)
            )
            return result.scalar_one_or_none()

    async def update_balance(self, account_id: int, balance: Decimal) -> None:
        """Overwrite the stored balance. No lock is taken; see execute_transaction."""
        with _store_errors("Error al actualizar saldo"):
            await self.session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(balance=balance)
            )

    # ------------------------------------------------------------------
    # Movements
    # ------------------------------------------------------------------

    async def insert_movement(
        self,
        account_id: int,
        amount: Decimal,
        kind: MovementKind,
    ) -> Movement:
        with _store_errors("Error al registrar movimiento"):
            movement = Movement(account_id=account_id, amount=amount, kind=kind)
            self.session.add(movement)
            await self.session.flush()
            return movement

    async def list_movements(self, account_id: int) -> list[Movement]:
        """All movements of an account, in storage (insertion) order."""
        with _store_errors("Error al consultar movimientos"):
            result = await self.session.execute(
                select(Movement)
                .where(Movement.account_id == account_id)
                .order_by(Movement.id)
            )
            return list(result.scalars().all())

    async def list_movements_in_month(
        self,
        account_id: int,
        month: int,
        year: int,
    ) -> list[Movement]:
        """An account's movements within one month, oldest first."""
        month_start, month_end = month_bounds(month, year)
        with _store_errors("Error al generar extracto mensual"):
            result = await self.session.execute(
                select(Movement)
                .where(
                    Movement.account_id == account_id,
                    Movement.date >= month_start,
                    Movement.date < month_end,
                )
                .order_by(Movement.date.asc(), Movement.id.asc())
            )
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Holders
    # ------------------------------------------------------------------

    async def get_holder(self, holder_id: int) -> AccountHolder | None:
        with _store_errors("Error al consultar titular"):
            result = await self.session.execute(
                select(AccountHolder).where(AccountHolder.id == holder_id)
            )
            return result.scalar_one_or_none()

    async def get_account_holder(self, account_id: int) -> AccountHolder | None:
        """The holder owning an account, or None if either row is missing."""
        with _store_errors("Error al obtener ciudad de la cuenta"):
            result = await self.session.execute(
                select(AccountHolder)
                .join(Account, Account.holder_id == AccountHolder.id)
                .where(Account.id == account_id)
            )
            return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Report aggregates
    # ------------------------------------------------------------------

    async def count_movements_by_holder(
        self,
        month: int,
        year: int,
    ) -> list[HolderMovementCount]:
        """Movements per holder in a month, busiest holder first."""
        month_start, month_end = month_bounds(month, year)
        transaction_count = func.count(Movement.id).label("transaction_count")

        with _store_errors("Error al generar reporte de transacciones"):
            result = await self.session.execute(
                select(Account.holder_id.label("holder_id"), transaction_count)
                .select_from(Movement)
                .join(Account, Account.id == Movement.account_id)
                .where(
                    Movement.date >= month_start,
                    Movement.date < month_end,
                )
                .group_by(Account.holder_id)
                .order_by(transaction_count.desc(), Account.holder_id.asc())
            )
            return [
                HolderMovementCount(
                    holder_id=row.holder_id,
                    transaction_count=row.transaction_count,
                )
                for row in result
            ]

    async def sum_out_of_city_withdrawals(
        self,
        month: int,
        year: int,
        threshold: Decimal,
    ) -> list[HolderWithdrawalTotal]:
        """
        Withdrawal totals per holder above `threshold`, restricted to
        out-of-city withdrawals.

        The city filter compares the holder's city with a correlated
        subquery that selects the city of the same holder, so it never
        matches and the result is empty. It is kept as-is: the reference
        city the report should compare against is not known.
        """
        month_start, month_end = month_bounds(month, year)
        holder = aliased(AccountHolder)
        registered = aliased(AccountHolder)

        registered_city = (
            select(registered.city)
            .where(registered.id == Account.holder_id)
            .correlate(Account)
            .scalar_subquery()
        )
        total_amount = func.sum(Movement.amount)

        with _store_errors("Error al generar reporte de retiros fuera de ciudad"):
            result = await self.session.execute(
                select(
                    Account.holder_id.label("holder_id"),
                    total_amount.label("total_amount"),
                )
                .select_from(Movement)
                .join(Account, Account.id == Movement.account_id)
                .join(holder, holder.id == Account.holder_id)
                .where(
                    Movement.date >= month_start,
                    Movement.date < month_end,
                    Movement.kind == MovementKind.WITHDRAWAL,
                    holder.city != registered_city,
                )
                .group_by(Account.holder_id)
                .having(total_amount > threshold)
            )
            return [
                HolderWithdrawalTotal(
                    holder_id=row.holder_id,
                    total_amount=row.total_amount,
                )
                for row in result
            ]
