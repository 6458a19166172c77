"""
Tests for POST /cuentas/{id}/transacciones.

These tests verify:
  - Deposits increase the balance and the new balance is returned
  - Withdrawals decrease the balance when funds are sufficient
  - Withdrawing the exact balance leaves zero
  - Withdrawals larger than the balance are rejected with no writes
  - Request validation (tipo, valor, path id) answers 400 {"error": ...}
  - Unknown accounts answer 400 "Cuenta no encontrada"
"""

import pytest


async def _movements(client, account_id):
    response = await client.get(f"/cuentas/{account_id}/movimientos")
    assert response.status_code == 200
    return response.json()


class TestDeposit:
    """Tests for deposito transactions."""

    async def test_deposit_increases_balance(self, client, make_account):
        account = await make_account(balance="100")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "deposito", "valor": 250},
        )
        assert response.status_code == 200
        assert response.json() == {"saldo": 350}

        movements = await _movements(client, account.id)
        assert len(movements) == 1
        assert movements[0]["tipo"] == "deposito"
        assert movements[0]["valor"] == 250
        assert movements[0]["cuentaId"] == account.id

    async def test_multiple_deposits_accumulate(self, client, make_account):
        account = await make_account()

        await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "deposito", "valor": 50.25},
        )
        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "deposito", "valor": 30.5},
        )
        assert response.json()["saldo"] == pytest.approx(80.75)

        balance = await client.get(f"/cuentas/{account.id}/saldo")
        assert balance.json()["saldo"] == pytest.approx(80.75)


class TestWithdrawal:
    """Tests for retiro transactions."""

    async def test_withdrawal_decreases_balance(self, client, make_account):
        account = await make_account(balance="1000")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "retiro", "valor": 300},
        )
        assert response.status_code == 200
        assert response.json()["saldo"] == 700

    async def test_exact_balance_withdrawal_succeeds(self, client, make_account):
        """Withdrawing 500 from 500 leaves 0 and records one withdrawal."""
        account = await make_account(balance="500")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "retiro", "valor": 500},
        )
        assert response.status_code == 200
        assert response.json()["saldo"] == 0

        movements = await _movements(client, account.id)
        assert [m["tipo"] for m in movements] == ["retiro"]
        assert movements[0]["valor"] == 500

    async def test_withdrawal_rejected_insufficient_balance(self, client, make_account):
        """Withdrawing 200 from 100 fails; balance stays 100, nothing recorded."""
        account = await make_account(balance="100")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "retiro", "valor": 200},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Saldo insuficiente"}

        balance = await client.get(f"/cuentas/{account.id}/saldo")
        assert balance.json()["saldo"] == 100
        assert await _movements(client, account.id) == []


class TestValidation:
    """Request validation on the transaction endpoint."""

    async def test_invalid_tipo(self, client, make_account):
        account = await make_account(balance="100")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "transferencia", "valor": 10},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Tipo de transacción no válido"}

    async def test_tipo_checked_before_valor(self, client, make_account):
        account = await make_account(balance="100")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "otro", "valor": -5},
        )
        assert response.json() == {"error": "Tipo de transacción no válido"}

    @pytest.mark.parametrize("valor", [0, -10])
    async def test_non_positive_valor(self, client, make_account, valor):
        account = await make_account(balance="100")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "deposito", "valor": valor},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "El valor de la transacción debe ser positivo"}

        balance = await client.get(f"/cuentas/{account.id}/saldo")
        assert balance.json()["saldo"] == 100

    @pytest.mark.parametrize("valor", [0.004, 10.005])
    async def test_sub_cent_valor_rejected(self, client, make_account, valor):
        account = await make_account(balance="100")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "deposito", "valor": valor},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "El valor de la transacción debe ser positivo"}

        movements = await client.get(f"/cuentas/{account.id}/movimientos")
        assert movements.json() == []

    async def test_two_decimal_valor_accepted(self, client, make_account):
        account = await make_account(balance="100")

        response = await client.post(
            f"/cuentas/{account.id}/transacciones",
            json={"tipo": "deposito", "valor": 12.34},
        )
        assert response.status_code == 200
        assert response.json() == {"saldo": 112.34}

    async def test_unknown_account(self, client):
        response = await client.post(
            "/cuentas/9999/transacciones",
            json={"tipo": "deposito", "valor": 10},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Cuenta no encontrada"}

    async def test_non_numeric_account_id(self, client):
        response = await client.post(
            "/cuentas/abc/transacciones",
            json={"tipo": "deposito", "valor": 10},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Parámetros no válidos"}


class TestAccountReads:
    """Balance, movements and city endpoints."""

    async def test_balance_of_unknown_account(self, client):
        response = await client.get("/cuentas/12345/saldo")
        assert response.status_code == 400
        assert response.json() == {"error": "Cuenta no encontrada"}

    async def test_movements_in_storage_order(self, client, make_account):
        account = await make_account(balance="0")

        for tipo, valor in [("deposito", 100), ("retiro", 40), ("deposito", 5)]:
            response = await client.post(
                f"/cuentas/{account.id}/transacciones",
                json={"tipo": tipo, "valor": valor},
            )
            assert response.status_code == 200

        movements = await _movements(client, account.id)
        assert [(m["tipo"], m["valor"]) for m in movements] == [
            ("deposito", 100),
            ("retiro", 40),
            ("deposito", 5),
        ]
        assert movements[0]["id"] < movements[1]["id"] < movements[2]["id"]

    async def test_movements_of_unknown_account_is_empty(self, client):
        assert await _movements(client, 4242) == []

    async def test_city(self, client, make_account):
        account = await make_account(city="Medellín")

        response = await client.get(f"/cuentas/{account.id}/ciudad")
        assert response.status_code == 200
        assert response.json() == {"ciudad": "Medellín"}

    async def test_city_of_unknown_account(self, client):
        response = await client.get("/cuentas/777/ciudad")
        assert response.status_code == 400
        assert response.json() == {"error": "Cuenta no encontrada"}

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
