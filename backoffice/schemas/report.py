"""
Pydantic schemas for the /reportes endpoints.

Built from the report service's entry dataclasses via from_attributes.
"""

from pydantic import BaseModel, Field

from backoffice.schemas.money import Money


class TransactionCountResponse(BaseModel):
    """One row of the monthly transaction ranking."""
    nombre: str = Field(validation_alias="name")
    numeroTransacciones: int = Field(validation_alias="transaction_count")

    model_config = {"from_attributes": True}


class WithdrawalTotalResponse(BaseModel):
    """One row of the out-of-city withdrawal report."""
    nombre: str = Field(validation_alias="name")
    valorTotalRetiros: Money = Field(validation_alias="total_amount")

    model_config = {"from_attributes": True}
