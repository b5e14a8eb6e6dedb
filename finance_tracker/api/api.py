from fastapi import APIRouter

from finance_tracker.core.auth import fastapi_users, auth_backend, UserRead, UserCreate
from finance_tracker.api.routes import categories, transactions, users

api_router = APIRouter()

# JWT login / logout
api_router.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/auth/jwt",
    tags=["Authentication"],
)
# Registration (also provisions the profile and default category)
api_router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/auth",
    tags=["Authentication"],
)
api_router.include_router(users.router, prefix="/users")
api_router.include_router(categories.router)
api_router.include_router(transactions.router)
