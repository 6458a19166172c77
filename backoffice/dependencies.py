"""
FastAPI dependencies shared by the routers.

  get_db (AsyncSession per request)
      └── get_store (LedgerStore over that session)

Route handlers declare `store: LedgerStore = Depends(get_store)` and pass
the store explicitly to the service functions; no module holds a global
connection.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.database import get_db
from backoffice.store import LedgerStore


async def get_store(db: AsyncSession = Depends(get_db)) -> LedgerStore:
    """Wrap the request's session in a LedgerStore."""
    return LedgerStore(db)
