"""
Report service: monthly analytical reports over all accounts.

Two reports:
  - monthly_transaction_report: holders ranked by number of movements
  - out_of_city_withdrawal_report: holders whose out-of-city withdrawals
    add up to more than OUT_OF_CITY_WITHDRAWAL_THRESHOLD

Both aggregate per holder in the store, then resolve each holder's full
name one by one. A group whose holder row cannot be found is dropped
from the report without raising.
"""

from dataclasses import dataclass
from decimal import Decimal

from backoffice.config import settings
from backoffice.logging_config import get_logger
from backoffice.store import LedgerStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransactionCountEntry:
    name: str
    transaction_count: int


@dataclass(frozen=True)
class WithdrawalTotalEntry:
    name: str
    total_amount: Decimal


async def _holder_name(store: LedgerStore, holder_id: int) -> str | None:
    holder = await store.get_holder(holder_id)
    if holder is None:
        logger.debug("Holder %s not found, skipped in report", holder_id)
        return None
    return holder.full_name


async def monthly_transaction_report(
    store: LedgerStore,
    month: int,
    year: int,
) -> list[TransactionCountEntry]:
    """
    Rank holders by the number of movements on their accounts in a month.

    Returns:
        Entries ordered by transaction count, highest first.
    """
    counts = await store.count_movements_by_holder(month, year)

    report: list[TransactionCountEntry] = []
    for row in counts:
        name = await _holder_name(store, row.holder_id)
        if name is not None:
            report.append(
                TransactionCountEntry(name=name, transaction_count=row.transaction_count)
            )

    logger.info("Monthly transaction report %02d/%d: %d holders", month, year, len(report))
    return report


async def out_of_city_withdrawal_report(
    store: LedgerStore,
    month: int,
    year: int,
    threshold: Decimal | None = None,
) -> list[WithdrawalTotalEntry]:
    """
    List holders whose out-of-city withdrawals in a month exceed the threshold.

    See LedgerStore.sum_out_of_city_withdrawals for how "out of city" is
    evaluated.
    """
    if threshold is None:
        threshold = settings.OUT_OF_CITY_WITHDRAWAL_THRESHOLD

    totals = await store.sum_out_of_city_withdrawals(month, year, threshold)

    report: list[WithdrawalTotalEntry] = []
    for row in totals:
        name = await _holder_name(store, row.holder_id)
        if name is not None:
            report.append(WithdrawalTotalEntry(name=name, total_amount=row.total_amount))

    logger.info(
        "Out-of-city withdrawal report %02d/%d (threshold %s): %d holders",
        month,
        year,
        threshold,
        len(report),
    )
    return report
