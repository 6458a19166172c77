#!/usr/bin/env python3
"""
Demo seed script: populates the database with sample data for demos.

!! NOT FOR PRODUCTION !!
Account holders and accounts are provisioned outside the API, so this
script inserts them straight into the database. Deposits and withdrawals
then go through the running API (POST /cuentas/{id}/transacciones) so
balances and movements stay consistent, and finally the movements are
backdated across the last few months so statements and monthly reports
have something to show.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Reset the database:
    python demo/seed.py --reset

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000
"""

import argparse
import asyncio
import os
import random
from datetime import datetime, timedelta, timezone

import httpx
from sqlalchemy import update
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

import backoffice.models  # noqa: F401
from backoffice.config import settings
from backoffice.database import Base
from backoffice.models import Account, AccountHolder, Movement

BASE_URL = "http://localhost:8000"

# Months of history to spread movements over (0 = current month)
HISTORY_MONTHS = 3

# ---------------------------------------------------------------------------
# Demo holders
# ---------------------------------------------------------------------------

HOLDERS = [
    {
        "first_name": "Juan",
        "last_name": "Pérez",
        "city": "Bogotá",
        "accounts": [850_000, 5_000_000],
    },
    {
        "first_name": "María",
        "last_name": "López",
        "city": "Medellín",
        "accounts": [1_200_000],
    },
    {
        "first_name": "Carlos",
        "last_name": "Gómez",
        "city": "Cali",
        "accounts": [3_200_000, 12_000_000],
    },
    {
        "first_name": "Lucía",
        "last_name": "Martínez",
        "city": "Barranquilla",
        "accounts": [600_000],
    },
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


async def provision_holders() -> list[tuple[str, list[int]]]:
    """Insert holders and zero-balance accounts directly into the database."""
    engine = create_async_engine(settings.DATABASE_URL)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    provisioned: list[tuple[str, list[int]]] = []
    async with session_factory() as session:
        for data in HOLDERS:
            holder = AccountHolder(
                first_name=data["first_name"],
                last_name=data["last_name"],
                city=data["city"],
            )
            session.add(holder)
            await session.flush()

            accounts = [Account(holder_id=holder.id) for _ in data["accounts"]]
            session.add_all(accounts)
            await session.flush()
            provisioned.append((holder.full_name, [a.id for a in accounts]))
        await session.commit()

    await engine.dispose()
    return provisioned


async def transact(client: httpx.AsyncClient, account_id: int, tipo: str, valor: int) -> httpx.Response:
    return await client.post(
        f"{BASE_URL}/cuentas/{account_id}/transacciones",
        json={"tipo": tipo, "valor": valor},
    )


async def seed_history(client: httpx.AsyncClient, account_id: int, initial_deposit: int) -> tuple[int, int]:
    """Initial deposit plus a random mix of movements. Returns (accepted, rejected)."""
    accepted = rejected = 0

    resp = await transact(client, account_id, "deposito", initial_deposit)
    resp.raise_for_status()
    accepted += 1

    for _ in range(random.randint(4, 12)):
        if random.random() < 0.35:
            resp = await transact(client, account_id, "deposito", random.randint(50_000, 800_000))
        else:
            resp = await transact(client, account_id, "retiro", random.randint(10_000, 400_000))

        if resp.status_code == 200:
            accepted += 1
        else:
            rejected += 1

    return accepted, rejected


async def backdate_movements(account_ids: list[int]) -> None:
    """Spread each account's movements, in order, over the last HISTORY_MONTHS months."""
    engine = create_async_engine(settings.DATABASE_URL)
    session_factory = async_sessionmaker(engine, class_=AsyncSession)
    now = datetime.now(timezone.utc)

    async with httpx.AsyncClient(timeout=30) as client, session_factory() as session:
        for account_id in account_ids:
            resp = await client.get(f"{BASE_URL}/cuentas/{account_id}/movimientos")
            resp.raise_for_status()
            movements = resp.json()

            # Oldest movement goes furthest back
            ts = now - timedelta(days=30 * HISTORY_MONTHS)
            step = timedelta(days=30 * HISTORY_MONTHS) / max(len(movements), 1)
            for movement in movements:
                ts += step
                jitter = timedelta(hours=random.randint(-6, 6), minutes=random.randint(0, 59))
                await session.execute(
                    update(Movement)
                    .where(Movement.id == movement["id"])
                    .values(date=min(ts + jitter, now))
                )
        await session.commit()

    await engine.dispose()


async def seed(base_url: str) -> None:
    global BASE_URL
    BASE_URL = base_url

    print("\n========================================")
    print("  Seeding back-office demo data")
    print("========================================\n")

    provisioned = await provision_holders()
    all_account_ids: list[int] = []

    async with httpx.AsyncClient(timeout=30) as client:
        for (name, account_ids), data in zip(provisioned, HOLDERS):
            log(f"{name}:")
            for account_id, initial_deposit in zip(account_ids, data["accounts"]):
                accepted, rejected = await seed_history(client, account_id, initial_deposit)
                saldo = (await client.get(f"{BASE_URL}/cuentas/{account_id}/saldo")).json()["saldo"]
                log(f"  cuenta {account_id}: {accepted} movimientos, {rejected} rechazados, saldo {saldo:,.2f}")
                all_account_ids.append(account_id)

    await backdate_movements(all_account_ids)

    now = datetime.now(timezone.utc)
    async with httpx.AsyncClient(timeout=30) as client:
        resp = await client.get(
            f"{BASE_URL}/reportes/transacciones-mensuales",
            params={"mes": now.month, "año": now.year},
        )
    print("\n  Transacciones del mes:")
    for row in resp.json():
        log(f"  {row['nombre']}: {row['numeroTransacciones']}")
    print()


def reset_database() -> None:
    """Delete the SQLite database file so the server recreates it on restart."""
    db_path = os.path.join(os.path.dirname(__file__), "..", "data", "bank.db")
    db_path = os.path.normpath(db_path)

    if os.path.exists(db_path):
        os.remove(db_path)
        print(f"\n  Deleted {db_path}")
        print("  Restart the server to recreate empty tables.\n")
    else:
        print(f"\n  No database found at {db_path}\n")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Demo seed script (NOT FOR PRODUCTION)",
        epilog="Creates sample holders, accounts, and movements for demos.",
    )
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Delete the database file and exit (restart server to recreate)",
    )
    args = parser.parse_args()

    if args.reset:
        reset_database()
        return

    await seed(args.base_url)


if __name__ == "__main__":
    asyncio.run(main())
