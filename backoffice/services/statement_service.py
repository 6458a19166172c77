"""
Statement service: monthly account statement generation.

render_statement() turns an ordered list of movements into the text of
a statement: one line per movement plus the final balance. It starts
from zero and walks the movements in the order given, so the caller
decides the chronology; generate_monthly_statement() asks the store for
the month's movements oldest first.

Example output:

    **Extracto mensual**

    - 2024-05-02 09:15:00: deposito - 1500.00€
    - 2024-05-10 18:40:12: retiro - 200.00€

    **Saldo final**: 1300.00€
"""

from collections.abc import Iterable
from decimal import Decimal

from backoffice.config import settings
from backoffice.logging_config import get_logger
from backoffice.models.movement import Movement, MovementKind
from backoffice.store import LedgerStore

logger = get_logger(__name__)

STATEMENT_HEADER = "**Extracto mensual**"
FINAL_BALANCE_LABEL = "**Saldo final**"


def render_statement(
    movements: Iterable[Movement],
    currency_symbol: str | None = None,
) -> str:
    """
    Render movements as a statement with a running final balance.

    Deposits add to the balance and withdrawals subtract from it. The
    movements are not re-sorted. The currency symbol defaults to
    settings.CURRENCY_SYMBOL, read at call time.
    """
    if currency_symbol is None:
        currency_symbol = settings.CURRENCY_SYMBOL

    final_balance = Decimal("0")
    lines = [STATEMENT_HEADER, ""]

    for movement in movements:
        if movement.kind == MovementKind.DEPOSIT:
            final_balance += movement.amount
        elif movement.kind == MovementKind.WITHDRAWAL:
            final_balance -= movement.amount

        lines.append(
            f"- {movement.date:%Y-%m-%d %H:%M:%S}: "
            f"{MovementKind(movement.kind).value} - {movement.amount}{currency_symbol}"
        )

    lines.append("")
    lines.append(f"{FINAL_BALANCE_LABEL}: {final_balance}{currency_symbol}")
    return "\n".join(lines)


async def generate_monthly_statement(
    store: LedgerStore,
    account_id: int,
    month: int,
    year: int,
) -> str:
    """
    Generate the statement of one account for one calendar month.

    An account without movements in that month (or an unknown account)
    yields an empty statement with a zero final balance.
    """
    movements = await store.list_movements_in_month(account_id, month, year)
    logger.debug(
        "Statement for account %s, %02d/%d: %d movements",
        account_id,
        month,
        year,
        len(movements),
    )
    return render_statement(movements)
