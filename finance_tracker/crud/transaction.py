# finance_tracker/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import exists, Select
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from finance_tracker.crud.category import is_ascending
from typing import Iterable, List, Optional
import uuid

TRANSACTION_SORT_COLUMNS = {
    "amount": Transaction.amount,
    "type": Transaction.type,
    "date": Transaction.date,
    "category": Category.name,
}

# Per-category paging bounds
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 200


def clamp_page_size(take: int) -> int:
    return max(MIN_PAGE_SIZE, min(take, MAX_PAGE_SIZE))


class TransactionStore:
    """Transaction persistence, always scoped by the owning user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Generic CRUD

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        return await self.db.get(Transaction, transaction_id)

    async def find_all(self, *criteria) -> List[Transaction]:
        result = await self.db.execute(select(Transaction).where(*criteria))
        return list(result.scalars().all())

    def add(self, tx: Transaction) -> None:
        self.db.add(tx)

    async def remove(self, tx: Transaction) -> None:
        await self.db.delete(tx)

    async def flush(self) -> None:
        await self.db.flush()

    async def save_changes(self) -> None:
        await self.db.commit()

    async def discard_changes(self) -> None:
        await self.db.rollback()

    # Transaction-specific queries

    def get_transactions_for_user(self, user_id: uuid.UUID) -> Select:
        return select(Transaction).where(Transaction.user_id == user_id)

    async def get_transaction_with_category(
        self, transaction_id: int, user_id: uuid.UUID
    ) -> Optional[Transaction]:
        # populate_existing so a just-changed category link is reloaded
        result = await self.db.execute(
            self.get_transactions_for_user(user_id)
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_sorted_transactions_for_user(
        self, user_id: uuid.UUID, sort_by: Optional[str], sort_order: Optional[str]
    ) -> List[Transaction]:
        key = (sort_by or "").lower()
        column = TRANSACTION_SORT_COLUMNS.get(key, Transaction.date)
        stmt = self.get_transactions_for_user(user_id)
        if key == "category":
            stmt = stmt.join(Category, Transaction.category_id == Category.id)
        if is_ascending(sort_order):
            stmt = stmt.order_by(column.asc(), Transaction.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Transaction.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_page_in_category(
        self, category_id: int, user_id: uuid.UUID, skip: int, take: int
    ) -> List[Transaction]:
        result = await self.db.execute(
            self.get_transactions_for_user(user_id)
            .where(Transaction.category_id == category_id)
            .order_by(Transaction.date.asc(), Transaction.id.asc())
            .offset(max(skip, 0))
            .limit(clamp_page_size(take))
        )
        return list(result.scalars().all())

    async def get_transactions_in_category(
        self, category_id: int, user_id: uuid.UUID
    ) -> List[Transaction]:
        result = await self.db.execute(
            self.get_transactions_for_user(user_id).where(Transaction.category_id == category_id)
        )
        return list(result.scalars().all())

    async def has_transactions_in_category(self, category_id: int, user_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    Transaction.category_id == category_id,
                    Transaction.user_id == user_id,
                )
            )
        )
        return bool(result.scalar())

    def reassign_category(self, transactions: Iterable[Transaction], category: Category) -> int:
        """Point each transaction at ``category``; returns how many moved."""
        moved = 0
        for tx in transactions:
            tx.category = category
            moved += 1
        return moved
