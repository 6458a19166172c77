"""
Pydantic schemas for the /cuentas endpoints.

Field names follow the public (Spanish) API contract; validation_alias
maps them onto the English ORM attribute names so responses can be
built straight from model instances.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from backoffice.models.movement import MovementKind
from backoffice.schemas.money import Money


class TransactionRequest(BaseModel):
    """Request body for POST /cuentas/{cuenta_id}/transacciones."""
    tipo: MovementKind = Field(description="deposito or retiro")
    valor: Decimal = Field(
        gt=0,
        decimal_places=2,
        description="Amount to move (must be positive, at most two decimals)",
    )


class BalanceResponse(BaseModel):
    """Current stored balance of an account."""
    saldo: Money


class MovementResponse(BaseModel):
    """Public representation of a movement."""
    id: int
    cuentaId: int = Field(validation_alias="account_id")
    fecha: datetime = Field(validation_alias="date")
    tipo: MovementKind = Field(validation_alias="kind")
    valor: Money = Field(validation_alias="amount")

    model_config = {"from_attributes": True}


class StatementResponse(BaseModel):
    """Rendered monthly statement."""
    extracto: str


class CityResponse(BaseModel):
    """Registered city of the account's holder."""
    ciudad: str
