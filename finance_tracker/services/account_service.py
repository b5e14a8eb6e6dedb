# finance_tracker/services/account_service.py
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.crud.category import CategoryStore
from finance_tracker.crud.user_profile import get_profile_by_user_id
from finance_tracker.models.category import Category, CategoryType, DEFAULT_CATEGORY_NAME
from finance_tracker.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


async def provision_account(user_id: uuid.UUID, display_name: str, db: AsyncSession) -> bool:
    """Create the user's profile and default category if they are missing.

    Runs right after registration and again on every login, so an account
    whose first provisioning failed is repaired later. Both rows are committed
    together. Returns True when anything was created.
    """
    categories = CategoryStore(db)
    created = []
    try:
        if await get_profile_by_user_id(user_id, db) is None:
            db.add(UserProfile(user_id=user_id, display_name=display_name))
            created.append("profile")

        if await categories.get_default_category_for_user(user_id) is None:
            categories.add(
                Category(
                    user_id=user_id,
                    name=DEFAULT_CATEGORY_NAME,
                    type=CategoryType.Neutral,
                    is_default=True,
                )
            )
            created.append("default category")

        if not created:
            return False
        await categories.save_changes()
    except Exception:
        await categories.discard_changes()
        raise
    logger.info(f"Provisioned {' and '.join(created)} for user {user_id}")
    return True
