"""
Account service: balances, movements and deposit/withdrawal execution.

This module handles:
  - Balance lookup for a single account
  - Movement listing (all movements, storage order)
  - Transaction execution: balance check, balance update, movement record
  - Movement recording with amount/kind validation
  - The registered city of an account's holder

Every function takes the LedgerStore as its first argument; the router
layer builds one per request from the request's session.

Concurrency caveat:
  execute_transaction() reads the balance, computes the new value in
  Python and writes it back, with no SELECT ... FOR UPDATE in between.
  Two concurrent transactions against the same account can therefore
  both start from the same balance and one of the updates is lost.
"""

from decimal import Decimal

from backoffice.exceptions import (
    AccountNotFoundError,
    HolderNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidMovementKindError,
)
from backoffice.logging_config import get_logger
from backoffice.models.movement import Movement, MovementKind
from backoffice.store import LedgerStore

logger = get_logger(__name__)


def _coerce_kind(kind: MovementKind | str) -> MovementKind:
    try:
        return MovementKind(kind)
    except ValueError:
        raise InvalidMovementKindError(kind)


async def get_balance(store: LedgerStore, account_id: int) -> Decimal:
    """
    Get the stored balance of an account.

    Raises:
        AccountNotFoundError: If no account has this id.
    """
    account = await store.get_account(account_id)
    if account is None:
        raise AccountNotFoundError(account_id)
    return account.balance


async def get_movements(store: LedgerStore, account_id: int) -> list[Movement]:
    """All movements of an account, unfiltered, in storage order."""
    return await store.list_movements(account_id)


async def execute_transaction(
    store: LedgerStore,
    account_id: int,
    kind: MovementKind | str,
    amount: Decimal,
) -> None:
    """
    Apply a deposit or withdrawal to an account.

    Steps:
      1. Read the current balance
      2. Reject a withdrawal larger than that balance
      3. Write balance + amount (deposit) or balance - amount (withdrawal)
      4. Record the movement

    The amount is expected to be positive; the HTTP layer enforces that
    before calling in.

    Raises:
        InvalidMovementKindError: If kind is not deposito/retiro (nothing is written).
        AccountNotFoundError: If the account doesn't exist.
        InsufficientFundsError: If a withdrawal exceeds the balance (nothing is written).
    """
    movement_kind = _coerce_kind(kind)
    balance = await get_balance(store, account_id)

    if movement_kind == MovementKind.WITHDRAWAL and amount > balance:
        logger.warning(
            "Withdrawal of %s rejected for account %s: balance is %s",
            amount,
            account_id,
            balance,
        )
        raise InsufficientFundsError(
            account_id=account_id,
            requested=amount,
            available=balance,
        )

    if movement_kind == MovementKind.DEPOSIT:
        new_balance = balance + amount
    else:
        new_balance = balance - amount

    await store.update_balance(account_id, new_balance)
    await record_movement(store, account_id, amount, movement_kind)

    logger.info(
        "%s of %s on account %s, balance %s -> %s",
        movement_kind.value,
        amount,
        account_id,
        balance,
        new_balance,
    )


async def record_movement(
    store: LedgerStore,
    account_id: int,
    amount: Decimal,
    kind: MovementKind | str,
) -> Movement:
    """
    Persist one movement against an account.

    Raises:
        InvalidAmountError: If the amount is negative.
        InvalidMovementKindError: If kind is not deposito/retiro.
    """
    if amount < 0:
        raise InvalidAmountError()

    movement_kind = _coerce_kind(kind)
    return await store.insert_movement(account_id, amount, movement_kind)


async def get_account_city(store: LedgerStore, account_id: int) -> str:
    """
    Get the registered city of the holder who owns an account.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        HolderNotFoundError: If the account points at a missing holder.
    """
    holder = await store.get_account_holder(account_id)
    if holder is None:
        account = await store.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        raise HolderNotFoundError(account.holder_id)
    return holder.city
