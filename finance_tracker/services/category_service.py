# finance_tracker/services/category_service.py
import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.crud.category import CategoryStore
from finance_tracker.crud.transaction import TransactionStore
from finance_tracker.models.category import Category, CategoryType, is_default_category
from finance_tracker.models.transaction import is_compatible
from finance_tracker.schemas.category import CategoryIn, CategoryRead
from finance_tracker.schemas.transaction import TransactionRead
from finance_tracker.services.errors import LifecycleError
from finance_tracker.services.transaction_service import transaction_view

logger = logging.getLogger(__name__)


def category_view(category: Category, transaction_count: int = 0) -> CategoryRead:
    return CategoryRead(
        id=category.id,
        name=category.name,
        type=category.type,
        transaction_count=transaction_count,
    )


class CategoryService:
    """
    Category lifecycle for a single user.

    Updates and deletes keep every transaction in a category whose type it
    fits: when a category is retyped or removed, the affected transactions
    move to the user's default category ("WITHOUT CATEGORY"). The move and
    the category change commit together or not at all.
    """

    def __init__(self, db: AsyncSession):
        self.categories = CategoryStore(db)
        self.transactions = TransactionStore(db)

    async def list_categories(
        self, user_id: uuid.UUID, sort_by: Optional[str] = "name", sort_order: Optional[str] = "asc"
    ) -> List[CategoryRead]:
        rows = await self.categories.get_category_views_for_user(user_id, sort_by, sort_order)
        return [category_view(category, count) for category, count in rows]

    async def get_category(self, category_id: int, user_id: uuid.UUID) -> Optional[CategoryRead]:
        row = await self.categories.get_category_view(category_id, user_id)
        if row is None:
            return None
        return category_view(*row)

    async def list_category_transactions(
        self, category_id: int, user_id: uuid.UUID, skip: int = 0, take: int = 50
    ) -> Tuple[Optional[List[TransactionRead]], Optional[LifecycleError]]:
        if not await self.categories.category_exists_for_user(category_id, user_id):
            return None, LifecycleError.not_found
        rows = await self.transactions.get_page_in_category(category_id, user_id, skip, take)
        return [transaction_view(tx) for tx in rows], None

    async def create_category(self, user_id: uuid.UUID, cat_in: CategoryIn) -> CategoryRead:
        category = Category(user_id=user_id, name=cat_in.name, type=cat_in.type, is_default=False)
        try:
            self.categories.add(category)
            await self.categories.save_changes()
        except Exception:
            await self.categories.discard_changes()
            raise
        return category_view(category)

    async def update_category(
        self, category_id: int, user_id: uuid.UUID, cat_in: CategoryIn
    ) -> Tuple[bool, Optional[LifecycleError]]:
        try:
            category = await self.categories.get_category_for_user(category_id, user_id, lock=True)
            if category is None:
                await self.categories.discard_changes()
                return False, LifecycleError.not_found
            if is_default_category(category):
                await self.categories.discard_changes()
                return False, LifecycleError.immutable_default

            new_type = cat_in.type
            if new_type != category.type and new_type != CategoryType.Neutral:
                in_category = await self.transactions.get_transactions_in_category(category_id, user_id)
                incompatible = [tx for tx in in_category if not is_compatible(tx.type, new_type)]
                if incompatible:
                    default_category = await self.categories.get_default_category_for_user(user_id)
                    if default_category is None:
                        logger.error(
                            f"User {user_id} has no default category; refusing to retype "
                            f"category {category_id} with {len(incompatible)} incompatible transactions"
                        )
                        await self.categories.discard_changes()
                        return False, LifecycleError.invariant_violation
                    moved = self.transactions.reassign_category(incompatible, default_category)
                    logger.info(
                        f"Category {category_id} retyped {category.type.value} -> {new_type.value}; "
                        f"moved {moved} transactions to default category {default_category.id}"
                    )

            category.name = cat_in.name
            category.type = new_type
            await self.categories.save_changes()
        except Exception:
            await self.categories.discard_changes()
            raise
        return True, None

    async def delete_category(
        self, category_id: int, user_id: uuid.UUID
    ) -> Tuple[bool, Optional[LifecycleError]]:
        try:
            category = await self.categories.get_category_for_user(category_id, user_id, lock=True)
            if category is None:
                await self.categories.discard_changes()
                return False, LifecycleError.not_found
            if is_default_category(category):
                await self.categories.discard_changes()
                return False, LifecycleError.immutable_default

            if await self.transactions.has_transactions_in_category(category_id, user_id):
                default_category = await self.categories.get_default_category_for_user(user_id)
                if default_category is None:
                    logger.error(f"User {user_id} has no default category; cannot delete category {category_id}")
                    await self.categories.discard_changes()
                    return False, LifecycleError.invariant_violation

                to_move = await self.transactions.get_transactions_in_category(category_id, user_id)
                moved = self.transactions.reassign_category(to_move, default_category)
                # Write the new links before the category row goes away
                await self.transactions.flush()
                logger.info(
                    f"Moved {moved} transactions from category {category_id} "
                    f"to default category {default_category.id}"
                )

            await self.categories.remove(category)
            await self.categories.save_changes()
        except Exception:
            await self.categories.discard_changes()
            raise
        logger.info(f"Deleted category {category_id} for user {user_id}")
        return True, None
