# finance_tracker/crud/user_profile.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from finance_tracker.models.user_profile import UserProfile
from typing import Optional
import uuid

async def get_profile_by_user_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[UserProfile]:
    result = await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    return result.scalar_one_or_none()
