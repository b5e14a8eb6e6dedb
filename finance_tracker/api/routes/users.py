# finance_tracker/api/routes/users.py
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi_users import BaseUserManager
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from finance_tracker.core.auth import current_active_user, get_user_manager, User
from finance_tracker.core.database import get_async_session
from finance_tracker.crud.user_profile import get_profile_by_user_id
from finance_tracker.schemas.user import ProfileRead

logger = logging.getLogger(__name__)

router = APIRouter(tags=["User Management"])

# 1) GET /users/me
@router.get("/me", response_model=ProfileRead)
async def read_own_profile(
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Get current user's profile"""
    profile = await get_profile_by_user_id(user.id, db)
    return ProfileRead(
        id=user.id,
        email=user.email,
        display_name=profile.display_name if profile else None,
        created_at=profile.created_at if profile else None,
    )

# 2) DELETE /users/me
@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_own_account(
    user: User = Depends(current_active_user),
    user_manager: BaseUserManager[User, uuid.UUID] = Depends(get_user_manager),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete current user's account permanently.

    Profile, categories and transactions are removed by the database
    (ON DELETE CASCADE).
    """
    try:
        await user_manager.delete(user)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to delete account {user.id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error occurred while deleting account"
        )
    return None
