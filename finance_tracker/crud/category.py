# finance_tracker/crud/category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, Select
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from typing import List, Optional, Tuple
import uuid

# Allowed category sort keys; anything else sorts by name
CATEGORY_SORT_COLUMNS = {
    "name": Category.name,
    "type": Category.type,
}


def is_ascending(sort_order: Optional[str]) -> bool:
    return (sort_order or "").lower() != "desc"


class CategoryStore:
    """Category persistence, always scoped by the owning user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Generic CRUD

    async def get_by_id(self, category_id: int) -> Optional[Category]:
        return await self.db.get(Category, category_id)

    async def find_all(self, *criteria) -> List[Category]:
        result = await self.db.execute(select(Category).where(*criteria))
        return list(result.scalars().all())

    def add(self, category: Category) -> None:
        self.db.add(category)

    async def remove(self, category: Category) -> None:
        await self.db.delete(category)

    async def flush(self) -> None:
        await self.db.flush()

    async def save_changes(self) -> None:
        await self.db.commit()

    async def discard_changes(self) -> None:
        await self.db.rollback()

    # Category-specific queries

    def get_categories_for_user(self, user_id: uuid.UUID) -> Select:
        return select(Category).where(Category.user_id == user_id)

    async def get_category_for_user(
        self, category_id: int, user_id: uuid.UUID, lock: bool = False
    ) -> Optional[Category]:
        stmt = self.get_categories_for_user(user_id).where(Category.id == category_id)
        if lock:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_default_category_for_user(self, user_id: uuid.UUID) -> Optional[Category]:
        result = await self.db.execute(
            self.get_categories_for_user(user_id)
            .where(Category.is_default.is_(True))
            .order_by(Category.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    def _views_for_user(self, user_id: uuid.UUID) -> Select:
        return (
            select(Category, func.count(Transaction.id))
            .outerjoin(
                Transaction,
                (Transaction.category_id == Category.id) & (Transaction.user_id == user_id),
            )
            .where(Category.user_id == user_id)
            .group_by(Category.id)
        )

    async def get_category_views_for_user(
        self, user_id: uuid.UUID, sort_by: Optional[str], sort_order: Optional[str]
    ) -> List[Tuple[Category, int]]:
        """Return (category, transaction_count) pairs in the requested order."""
        column = CATEGORY_SORT_COLUMNS.get((sort_by or "").lower(), Category.name)
        if is_ascending(sort_order):
            ordering = (column.asc(), Category.id.asc())
        else:
            ordering = (column.desc(), Category.id.desc())
        result = await self.db.execute(self._views_for_user(user_id).order_by(*ordering))
        return [(category, count) for category, count in result.all()]

    async def get_category_view(
        self, category_id: int, user_id: uuid.UUID
    ) -> Optional[Tuple[Category, int]]:
        result = await self.db.execute(
            self._views_for_user(user_id).where(Category.id == category_id)
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    async def category_exists_for_user(self, category_id: int, user_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(Category.id).where(Category.id == category_id, Category.user_id == user_id)
        )
        return result.scalar_one_or_none() is not None
