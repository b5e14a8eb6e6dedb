# finance_tracker/api/deps.py
import uuid

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.core.database import get_async_session
from finance_tracker.core.auth import current_active_user, User
from finance_tracker.services.category_service import CategoryService
from finance_tracker.services.errors import LifecycleError
from finance_tracker.services.transaction_service import TransactionService

ERROR_STATUS = {
    LifecycleError.not_found: status.HTTP_404_NOT_FOUND,
    LifecycleError.immutable_default: status.HTTP_400_BAD_REQUEST,
    LifecycleError.category_not_found: status.HTTP_400_BAD_REQUEST,
    LifecycleError.type_mismatch: status.HTTP_400_BAD_REQUEST,
    LifecycleError.default_category_missing: status.HTTP_400_BAD_REQUEST,
    LifecycleError.invariant_violation: status.HTTP_409_CONFLICT,
}


async def get_current_user_id(user: User = Depends(current_active_user)) -> uuid.UUID:
    """Owning-user id of the authenticated caller (401 when there is none)."""
    return uuid.UUID(str(user.id))


async def get_category_service(db: AsyncSession = Depends(get_async_session)) -> CategoryService:
    return CategoryService(db)


async def get_transaction_service(db: AsyncSession = Depends(get_async_session)) -> TransactionService:
    return TransactionService(db)


def raise_for_error(error: LifecycleError, not_found_detail: str = "Not found") -> None:
    if error == LifecycleError.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found_detail)
    raise HTTPException(status_code=ERROR_STATUS[error], detail=error.message)
