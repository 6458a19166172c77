"""
Reports router: monthly analytical reports.

Endpoints:
  GET /reportes/transacciones-mensuales?mes=MM&año=YYYY
  GET /reportes/retiros-fuera-ciudad?mes=MM&año=YYYY

Both query parameters are required; a missing or non-numeric value is
answered with 400 {"error": "Parámetros no válidos"}.
"""

from fastapi import APIRouter, Depends, Query

from backoffice.dependencies import get_store
from backoffice.schemas.report import TransactionCountResponse, WithdrawalTotalResponse
from backoffice.services import report_service
from backoffice.store import LedgerStore

router = APIRouter()


@router.get(
    "/transacciones-mensuales",
    response_model=list[TransactionCountResponse],
    summary="Customers with the most transactions in a month",
)
async def monthly_transactions(
    mes: int = Query(..., ge=1, le=12, description="Report month (1-12)"),
    anio: int = Query(..., alias="año", ge=1, le=9998, description="Report year"),
    store: LedgerStore = Depends(get_store),
):
    """Holders ranked by number of movements, highest first."""
    return await report_service.monthly_transaction_report(store, month=mes, year=anio)


@router.get(
    "/retiros-fuera-ciudad",
    response_model=list[WithdrawalTotalResponse],
    summary="Customers with large out-of-city withdrawals in a month",
)
async def out_of_city_withdrawals(
    mes: int = Query(..., ge=1, le=12, description="Report month (1-12)"),
    anio: int = Query(..., alias="año", ge=1, le=9998, description="Report year"),
    store: LedgerStore = Depends(get_store),
):
    """
    Holders whose out-of-city withdrawals for the month add up to more
    than the configured threshold.
    """
    return await report_service.out_of_city_withdrawal_report(store, month=mes, year=anio)
