"""Фикстуры для тестов: временная SQLite-БД для API и отдельная БД на каждый тест ядра."""
import asyncio
import os
import tempfile
import uuid
from pathlib import Path

import pytest

# Тестовая БД задаётся до импорта приложения (settings читаются при импорте)
TEST_DB_PATH = Path(tempfile.gettempdir()) / f"foodable_test_{os.getpid()}.db"
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.setdefault("SUPERUSER_EMAIL", "admin@test.local")
os.environ.setdefault("SUPERUSER_PASSWORD", "admin-secret")
os.environ["SEED_DEMO_DATA"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from foodable.core.database import Base, build_engine, build_session_maker  # noqa: E402
from foodable.models import Offer, Restaurant  # noqa: E402

ADMIN_EMAIL = os.environ["SUPERUSER_EMAIL"]
ADMIN_PASSWORD = os.environ["SUPERUSER_PASSWORD"]


@pytest.fixture
def client():
    """Тестовый клиент приложения (с lifespan: таблицы и администратор)."""
    from foodable.main import app
    with TestClient(app) as c:
        yield c


def _unique_email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@test.local"


def register(client, role: str = "customer") -> dict:
    """Зарегистрировать пользователя и вернуть заголовок Authorization."""
    r = client.post(
        "/auth/register",
        json={"email": _unique_email(role), "password": "secret123", "name": role.title(), "role": role},
    )
    assert r.status_code == 201, r.text
    # Cookie последнего зарегистрированного не должна подменять пользователя в других запросах
    client.cookies.clear()
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def login_admin(client) -> dict:
    r = client.post("/auth/login", data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def create_owner_offer(client, qty: int, owner_headers: dict = None, **fields) -> str:
    """Владелец с рестораном и одним предложением; возвращает id предложения."""
    headers = owner_headers or register(client, "restaurant")
    r = client.post(
        "/me/restaurant",
        json={"name": "Test Kitchen", "area": "CBD", "heroUrl": "https://img.test/hero.jpg"},
        headers=headers,
    )
    assert r.status_code == 200, r.text
    body = {
        "title": "Rescue Box",
        "type": "mystery",
        "price": "8.00",
        "originalPrice": "22.00",
        "qty": qty,
        "pickupStart": "17:30",
        "pickupEnd": "19:00",
    }
    body.update(fields)
    r = client.post("/offers", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["id"]


@pytest.fixture
def owner_headers(client):
    return register(client, "restaurant")


@pytest.fixture
def customer_headers(client):
    return register(client, "customer")


@pytest.fixture
def run_db(tmp_path):
    """
    Запускает async-сценарий на отдельной SQLite-БД.
    Сценарий получает фабрику сессий; движок создаётся и закрывается внутри asyncio.run.
    """
    def _run(scenario):
        async def _main():
            engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'core.db'}")
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            try:
                return await scenario(build_session_maker(engine))
            finally:
                await engine.dispose()
        return asyncio.run(_main())
    return _run


async def seed_offer(session_maker, quantity: int, title: str = "Pasta Family Pack") -> str:
    async with session_maker() as session:
        restaurant = Restaurant(name="Nonna's", area="Fortitude Valley", hero_url="https://img.test/n.jpg")
        session.add(restaurant)
        await session.flush()
        offer = Offer(
            restaurant_id=restaurant.id,
            title=title,
            price_cents=900,
            original_price_cents=2400,
            quantity=quantity,
        )
        session.add(offer)
        await session.commit()
        return offer.id


async def quantity_of(session_maker, offer_id: str) -> int:
    async with session_maker() as session:
        offer = await session.get(Offer, offer_id)
        return offer.quantity


@pytest.fixture
def fail_ledger_on(monkeypatch):
    """Журнал заказов падает с OperationalError на n-й записи (счёт с 1)."""
    from sqlalchemy.exc import OperationalError

    from foodable.services import order_ledger

    def _install(call_no: int) -> None:
        real_append = order_ledger.append_order
        calls = {"n": 0}

        async def append_order(db, offer_id):
            calls["n"] += 1
            if calls["n"] == call_no:
                raise OperationalError("INSERT INTO orders", {}, Exception("disk I/O error"))
            return await real_append(db, offer_id)

        monkeypatch.setattr(order_ledger, "append_order", append_order)

    return _install
