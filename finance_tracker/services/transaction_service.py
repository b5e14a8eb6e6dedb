# finance_tracker/services/transaction_service.py
import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.crud.category import CategoryStore
from finance_tracker.crud.transaction import TransactionStore
from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction, is_compatible
from finance_tracker.schemas.transaction import TransactionIn, TransactionRead, to_utc
from finance_tracker.services.errors import LifecycleError

logger = logging.getLogger(__name__)


def transaction_view(tx: Transaction) -> TransactionRead:
    return TransactionRead(
        id=tx.id,
        amount=tx.amount,
        date=tx.date,
        type=tx.type,
        category_id=tx.category_id,
        category_name=tx.category.name,
    )


class TransactionService:
    """
    Create/read/update/delete transactions for a user.

    Every write checks that the transaction type fits the chosen category
    (see ``is_compatible``). Failures come back as ``(None, LifecycleError)``
    and leave the database untouched.
    """

    def __init__(self, db: AsyncSession):
        self.categories = CategoryStore(db)
        self.transactions = TransactionStore(db)

    async def list_transactions(
        self, user_id: uuid.UUID, sort_by: Optional[str] = "date", sort_order: Optional[str] = "desc"
    ) -> List[TransactionRead]:
        rows = await self.transactions.get_sorted_transactions_for_user(user_id, sort_by, sort_order)
        return [transaction_view(tx) for tx in rows]

    async def get_transaction(self, transaction_id: int, user_id: uuid.UUID) -> Optional[TransactionRead]:
        tx = await self.transactions.get_transaction_with_category(transaction_id, user_id)
        if tx is None:
            return None
        return transaction_view(tx)

    async def _resolve_category(
        self, category_id: int, tx_in: TransactionIn, user_id: uuid.UUID
    ) -> Tuple[Optional[Category], Optional[LifecycleError]]:
        category = await self.categories.get_category_for_user(category_id, user_id)
        if category is None:
            return None, LifecycleError.category_not_found
        if not is_compatible(tx_in.type, category.type):
            return None, LifecycleError.type_mismatch
        return category, None

    async def create_transaction(
        self, user_id: uuid.UUID, tx_in: TransactionIn
    ) -> Tuple[Optional[TransactionRead], Optional[LifecycleError]]:
        category_id = tx_in.category_id
        if category_id == 0:
            default_category = await self.categories.get_default_category_for_user(user_id)
            if default_category is None:
                logger.warning(f"User {user_id} has no default category")
                return None, LifecycleError.default_category_missing
            category_id = default_category.id

        category, error = await self._resolve_category(category_id, tx_in, user_id)
        if error:
            return None, error

        tx = Transaction(
            user_id=user_id,
            amount=tx_in.amount,
            date=to_utc(tx_in.date),
            type=tx_in.type,
            category=category,
        )
        try:
            self.transactions.add(tx)
            await self.transactions.save_changes()
        except Exception:
            await self.transactions.discard_changes()
            raise

        created = await self.transactions.get_transaction_with_category(tx.id, user_id)
        return transaction_view(created), None

    async def update_transaction(
        self, transaction_id: int, user_id: uuid.UUID, tx_in: TransactionIn
    ) -> Tuple[Optional[TransactionRead], Optional[LifecycleError]]:
        tx = await self.transactions.get_transaction_with_category(transaction_id, user_id)
        if tx is None:
            return None, LifecycleError.not_found

        # No defaulting here: category_id 0 is looked up literally
        category, error = await self._resolve_category(tx_in.category_id, tx_in, user_id)
        if error:
            return None, error

        try:
            tx.amount = tx_in.amount
            tx.date = to_utc(tx_in.date)
            tx.type = tx_in.type
            tx.category = category
            await self.transactions.save_changes()
        except Exception:
            await self.transactions.discard_changes()
            raise

        updated = await self.transactions.get_transaction_with_category(transaction_id, user_id)
        return transaction_view(updated), None

    async def delete_transaction(
        self, transaction_id: int, user_id: uuid.UUID
    ) -> Tuple[bool, Optional[LifecycleError]]:
        tx = await self.transactions.get_transaction_with_category(transaction_id, user_id)
        if tx is None:
            return False, LifecycleError.not_found

        try:
            await self.transactions.remove(tx)
            await self.transactions.save_changes()
        except Exception:
            await self.transactions.discard_changes()
            raise
        return True, None
