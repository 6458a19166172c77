"""
Tests for the error mapping table.

Every domain error gets its own label for logging, while the wire status
stays a uniform 400.
"""

from decimal import Decimal

import pytest

from backoffice.exceptions import (
    ERROR_STATUS_CODES,
    ERROR_TYPES,
    AccountNotFoundError,
    BackOfficeError,
    HolderNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidMovementKindError,
    InvalidParametersError,
    StoreError,
    error_type_for,
    status_code_for,
)


@pytest.mark.parametrize(
    "exc, label",
    [
        (AccountNotFoundError(1), "not_found"),
        (HolderNotFoundError(1), "not_found"),
        (InsufficientFundsError(1, Decimal("2"), Decimal("1")), "insufficient_funds"),
        (InvalidAmountError(), "invalid_amount"),
        (InvalidMovementKindError("x"), "invalid_movement_kind"),
        (InvalidParametersError(), "invalid_parameters"),
        (StoreError("Error al consultar saldo", RuntimeError("boom")), "store_error"),
    ],
)
def test_each_error_has_its_own_label(exc, label):
    assert error_type_for(exc) == label
    assert status_code_for(label) == 400


def test_every_label_maps_to_400():
    assert set(ERROR_TYPES.values()) <= set(ERROR_STATUS_CODES)
    assert set(ERROR_STATUS_CODES.values()) == {400}


def test_unmapped_subclass_uses_parent_label():
    class ClosedAccountError(AccountNotFoundError):
        pass

    assert error_type_for(ClosedAccountError(3)) == "not_found"


def test_base_error_falls_back_to_default():
    assert error_type_for(BackOfficeError("algo")) == "error"
    assert status_code_for("error") == 400


def test_store_error_message_keeps_context():
    exc = StoreError("Error al consultar movimientos", RuntimeError("timeout"))
    assert exc.detail == "Error al consultar movimientos: timeout"
