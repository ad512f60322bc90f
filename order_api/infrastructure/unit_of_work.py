import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from order_api.application.interfaces import UnitOfWork
from order_api.infrastructure.repositories import (
    SQLAlchemyOrderRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyCustomerRepository,
    SQLAlchemyUserRepository,
)

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork:
    """Opens one session and transaction per `async with uow() as tx` block."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def __call__(self) -> AsyncIterator[UnitOfWork]:
        async with self._session_factory() as session:
            transaction = SessionUnitOfWork(session)
            try:
                yield transaction
            except Exception as e:
                logger.debug(f"Rolling back transaction after {type(e).__name__}")
                await session.rollback()
                raise
            if not transaction.committed:
                await session.rollback()


class SessionUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self._session = session
        self.committed = False
        self.orders = SQLAlchemyOrderRepository(session)
        self.products = SQLAlchemyProductRepository(session)
        self.customers = SQLAlchemyCustomerRepository(session)
        self.users = SQLAlchemyUserRepository(session)

    async def commit(self):
        await self._session.commit()
        self.committed = True

    async def rollback(self):
        await self._session.rollback()
        self.committed = False
