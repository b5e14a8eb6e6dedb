# finance_tracker/core/auth.py

import re
import uuid
import logging
from typing import Optional, Union

from fastapi import Depends, Request, Response
from fastapi_users import FastAPIUsers, BaseUserManager, UUIDIDMixin, InvalidPasswordException
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users import schemas
from pydantic import Field

from sqlalchemy import Column, String, Boolean, Uuid
from sqlalchemy.ext.asyncio import AsyncSession

from .database import Base, get_async_session
from .config import settings
from finance_tracker.services.account_service import provision_account

logger = logging.getLogger(__name__)

# 1. User DB model. Profile, categories and transactions reference it with
# ON DELETE CASCADE, so deleting the row removes the whole account.
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(length=320), unique=True, index=True, nullable=False)
    hashed_password = Column(String(length=1024), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

# 2. Pydantic schemas
class UserRead(schemas.BaseUser[uuid.UUID]):
    pass

class UserCreate(schemas.BaseUserCreate):
    display_name: str = Field(..., min_length=1, max_length=20)

    # display_name lives on UserProfile, not on the users table
    def create_update_dict(self):
        user_dict = super().create_update_dict()
        user_dict.pop("display_name", None)
        return user_dict

    def create_update_dict_superuser(self):
        user_dict = super().create_update_dict_superuser()
        user_dict.pop("display_name", None)
        return user_dict

class UserUpdate(schemas.BaseUserUpdate):
    pass

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 20
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[^a-zA-Z\d]).+$")

# 3. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
            raise InvalidPasswordException(
                reason=f"Password must be {PASSWORD_MIN_LENGTH} to {PASSWORD_MAX_LENGTH} characters"
            )
        if not PASSWORD_PATTERN.match(password):
            raise InvalidPasswordException(
                reason="Password must contain at least one uppercase letter, "
                       "one lowercase letter, and one special character."
            )

    async def create(self, user_create: UserCreate, safe: bool = False, request: Optional[Request] = None) -> User:
        user = await super().create(user_create, safe, request)
        await provision_account(user.id, user_create.display_name, self.user_db.session)
        return user

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} has registered.")

    async def on_after_login(
        self, user: User, request: Optional[Request] = None, response: Optional[Response] = None
    ):
        # Repairs accounts whose provisioning did not complete at registration
        display_name = user.email.split("@")[0][:20]
        if await provision_account(user.id, display_name, self.user_db.session):
            logger.warning(f"User {user.email} was missing profile or default category; restored on login")

    async def on_after_delete(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} deleted their account.")

# 4. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)

# 5. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)

# 6. Authentication
bearer_transport = BearerTransport(tokenUrl="/api/auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.SECRET_KEY,
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        token_audience=["fastapi-users:auth"]
    )

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# 7. FastAPI Users instance
fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

# 8. Current user dependency (401 when the token is missing or invalid)
current_active_user = fastapi_users.current_user(active=True)

__all__ = [
    "fastapi_users",
    "auth_backend",
    "current_active_user",
    "get_user_db",
    "get_user_manager",
    "User",
    "UserRead",
    "UserCreate",
    "UserUpdate",
]
