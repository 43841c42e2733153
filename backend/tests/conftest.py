import os
import tempfile

os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'delivery_tracker_unused.db')}",
)

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient

from delivery_tracker.config import settings
from delivery_tracker.database import (
    READ_ONLY_METHODS,
    build_engine,
    build_session_factory,
    get_db,
    init_db,
)
from delivery_tracker.main import app, seed_admin, seed_expense_types
from delivery_tracker.schemas.registry import CarCreate, ProductCreate, RouteCreate
from delivery_tracker.services.registry_service import cars, products, routes


@pytest.fixture
async def engine(tmp_path):
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def catalog(db):
    """Route R1, product P1 at 100/ton, car CAR-1."""
    route = await routes.create(db, RouteCreate(name="R1"))
    product = await products.create(db, ProductCreate(name="P1", price_per_ton=100.0))
    car = await cars.create(db, CarCreate(car_number="CAR-1"))
    return {"route": route, "product": product, "car": car}


@pytest.fixture
async def client(engine, session_factory):
    await seed_admin(session_factory)
    await seed_expense_types(session_factory)

    read_factory = build_session_factory(engine, immediate=False)

    async def override_get_db(request: Request):
        factory = read_factory if request.method in READ_ONLY_METHODS else session_factory
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_client(client):
    resp = await client.post(
        "/api/auth/login",
        json={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD},
    )
    assert resp.status_code == 200, resp.text
    return client
