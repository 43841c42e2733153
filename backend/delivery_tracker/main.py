import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from delivery_tracker.config import settings
from delivery_tracker.database import async_session_factory, init_db
from delivery_tracker.exceptions import DeliveryError
from delivery_tracker.models.expense_type import ExpenseType
from delivery_tracker.models.user import User
from delivery_tracker.routers import (
    auth,
    cars,
    entries,
    expense_types,
    expenses,
    pricing,
    products,
    routes,
    stats,
)
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.utils.auth import hash_password

logger = logging.getLogger(__name__)


async def seed_admin(
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> None:
    """Create the default admin user if no users exist."""
    async with session_factory() as session:
        result = await session.execute(select(User).limit(1))
        if result.scalar_one_or_none() is not None:
            return

        session.add(User(
            username=settings.ADMIN_USERNAME,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            is_active=True,
        ))
        await session.commit()
        logger.info("Default admin user '%s' created", settings.ADMIN_USERNAME)


async def seed_expense_types(
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> None:
    """Insert the default expense types when the table is empty."""
    async with session_factory() as session:
        result = await session.execute(select(func.count(ExpenseType.id)))
        if result.scalar() > 0:
            return

        session.add_all([ExpenseType(name=name) for name in settings.DEFAULT_EXPENSE_TYPES])
        await session.commit()
        logger.info("Seeded %d default expense types", len(settings.DEFAULT_EXPENSE_TYPES))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.getLogger("delivery_tracker").setLevel(settings.LOG_LEVEL)
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    await init_db()
    await seed_admin()
    await seed_expense_types()
    yield
    # Shutdown (nothing to clean up)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handlers ---


def _error_response(status_code: int, message: str, meta: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.fail(message, meta=meta).model_dump(),
    )


def _format_validation_errors(errors: list[dict]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(DeliveryError)
async def delivery_error_handler(request: Request, exc: DeliveryError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message, exc.meta)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    return _error_response(400, _format_validation_errors(exc.errors()))


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, _format_validation_errors(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


# Register all routers under /api; everything but auth requires a session
API_PREFIX = "/api"
_protected = [Depends(auth.get_current_user)]

app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(routes.router, prefix=API_PREFIX, dependencies=_protected)
app.include_router(products.router, prefix=API_PREFIX, dependencies=_protected)
app.include_router(cars.router, prefix=API_PREFIX, dependencies=_protected)
app.include_router(expense_types.router, prefix=API_PREFIX, dependencies=_protected)
app.include_router(pricing.router, prefix=API_PREFIX, dependencies=_protected)
app.include_router(entries.router, prefix=API_PREFIX, dependencies=_protected)
app.include_router(expenses.router, prefix=API_PREFIX, dependencies=_protected)
app.include_router(stats.router, prefix=API_PREFIX, dependencies=_protected)


@app.get("/health")
async def health_check() -> dict:
    return {"status": "ok", "version": settings.APP_VERSION}
