import os

# Settings are read at import time; point them at throwaway values first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["AUTO_CREATE_TABLES"] = "false"

from datetime import datetime, timezone
from decimal import Decimal
import uuid

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from finance_tracker.core.auth import User
from finance_tracker.core.database import Base, enable_sqlite_foreign_keys
from finance_tracker.crud.category import CategoryStore
from finance_tracker.models.category import Category, CategoryType
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.models import user_profile  # noqa: F401
from finance_tracker.services.account_service import provision_account


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


async def create_user(session: AsyncSession, email: str) -> uuid.UUID:
    user = User(email=email, hashed_password="not-a-real-hash")
    session.add(user)
    await session.commit()
    await provision_account(user.id, email.split("@")[0], session)
    return user.id


@pytest_asyncio.fixture
async def user_id(session):
    return await create_user(session, "alice@tracker.dev")


@pytest_asyncio.fixture
async def other_user_id(session):
    return await create_user(session, "bob@tracker.dev")


@pytest_asyncio.fixture
async def default_category(session, user_id) -> Category:
    return await CategoryStore(session).get_default_category_for_user(user_id)


async def add_category(session, user_id, name: str, type_: CategoryType) -> Category:
    category = Category(user_id=user_id, name=name, type=type_, is_default=False)
    session.add(category)
    await session.commit()
    return category


async def add_transaction(
    session,
    user_id,
    category: Category,
    type_: TransactionType,
    amount: str = "10.00",
    date: datetime = datetime(2025, 1, 5, 12, 0, tzinfo=timezone.utc),
) -> Transaction:
    tx = Transaction(
        user_id=user_id,
        amount=Decimal(amount),
        date=date,
        type=type_,
        category=category,
    )
    session.add(tx)
    await session.commit()
    return tx
