"""
Accounts router: balances, movements, statements and transactions.

Endpoints:
  POST /cuentas/{cuenta_id}/transacciones  Deposit or withdraw, returns the new balance
  GET  /cuentas/{cuenta_id}/saldo          Current balance
  GET  /cuentas/{cuenta_id}/movimientos    All movements, storage order
  GET  /cuentas/{cuenta_id}/extracto       Monthly statement (?mes=&año=)
  GET  /cuentas/{cuenta_id}/ciudad         Holder's registered city

Every failure is answered with 400 {"error": "..."} by the handlers in
backoffice/exceptions.py.
"""

from fastapi import APIRouter, Depends, Query

from backoffice.dependencies import get_store
from backoffice.schemas.account import (
    BalanceResponse,
    CityResponse,
    MovementResponse,
    StatementResponse,
    TransactionRequest,
)
from backoffice.services import account_service, statement_service
from backoffice.store import LedgerStore

router = APIRouter()


@router.post(
    "/{cuenta_id}/transacciones",
    response_model=BalanceResponse,
    summary="Deposit into or withdraw from an account",
)
async def create_transaction(
    cuenta_id: int,
    request: TransactionRequest,
    store: LedgerStore = Depends(get_store),
):
    """
    Apply a **deposito** or **retiro** and return the resulting balance.

    Withdrawals larger than the current balance are rejected and nothing
    is written.
    """
    await account_service.execute_transaction(
        store,
        account_id=cuenta_id,
        kind=request.tipo,
        amount=request.valor,
    )
    saldo = await account_service.get_balance(store, cuenta_id)
    return {"saldo": saldo}


@router.get(
    "/{cuenta_id}/saldo",
    response_model=BalanceResponse,
    summary="Check account balance",
)
async def get_balance(
    cuenta_id: int,
    store: LedgerStore = Depends(get_store),
):
    return {"saldo": await account_service.get_balance(store, cuenta_id)}


@router.get(
    "/{cuenta_id}/movimientos",
    response_model=list[MovementResponse],
    summary="List movements for an account",
)
async def list_movements(
    cuenta_id: int,
    store: LedgerStore = Depends(get_store),
):
    """List every movement of the account in the order it was recorded."""
    return await account_service.get_movements(store, cuenta_id)


@router.get(
    "/{cuenta_id}/extracto",
    response_model=StatementResponse,
    summary="Get monthly account statement",
)
async def get_statement(
    cuenta_id: int,
    mes: int = Query(..., ge=1, le=12, description="Statement month (1-12)"),
    anio: int = Query(..., alias="año", ge=1, le=9998, description="Statement year"),
    store: LedgerStore = Depends(get_store),
):
    """
    Render the month's movements, oldest first, with the final balance
    they add up to.
    """
    extracto = await statement_service.generate_monthly_statement(
        store,
        account_id=cuenta_id,
        month=mes,
        year=anio,
    )
    return {"extracto": extracto}


@router.get(
    "/{cuenta_id}/ciudad",
    response_model=CityResponse,
    summary="Get the account holder's city",
)
async def get_city(
    cuenta_id: int,
    store: LedgerStore = Depends(get_store),
):
    return {"ciudad": await account_service.get_account_city(store, cuenta_id)}
