# finance_tracker/main.py
import uvicorn
import os
import logging
from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.core.config import settings
from finance_tracker.core.database import engine, Base, get_async_session
from finance_tracker.api.api import api_router
# Register every table on Base.metadata
from finance_tracker.models import category, transaction, user_profile  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

TAGS = [
    {"name": "Authentication", "description": "Registration, login and logout"},
    {"name": "User Management", "description": "Profile and account deletion"},
    {"name": "categories", "description": "Income/expense categories"},
    {"name": "transactions", "description": "Transactions filed under categories"},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    openapi_tags=TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix="/api")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Database error"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Anything not mapped to a status code ends up here; details stay in the log."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/", tags=["Root"])
async def root():
    return {"message": f"{settings.APP_NAME} is running!", "version": settings.VERSION}


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_async_session)):
    """Liveness plus a database round-trip."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unhealthy: database unavailable")
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.on_event("startup")
async def on_startup():
    logger.info(f"Starting {settings.APP_NAME} {settings.VERSION} ({settings.ENVIRONMENT})")
    if not settings.AUTO_CREATE_TABLES:
        return
    # Development convenience; Alembic owns the schema everywhere else
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ Database tables created")


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("finance_tracker.main:app", host="0.0.0.0", port=port, reload=False)
