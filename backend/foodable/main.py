from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

from foodable.config import settings
from foodable.core.database import engine, Base, async_session_maker
from foodable.core.logging_config import setup_logging, get_logger
from foodable.models import Offer, OfferCategory, Restaurant, User, UserRole
from foodable.data.demo_catalog import DEMO_OFFERS, DEMO_RESTAURANTS
from foodable.api.auth import router as auth_router
from foodable.api.offers import router as offers_router
from foodable.api.owner import router as owner_router
from foodable.api.reservations import router as reservations_router
from foodable.api.restaurants import router as restaurants_router
from foodable.services.auth_service import hash_password, normalize_email

setup_logging()
logger = get_logger(__name__)


async def ensure_superuser():
    """Создать администратора из настроек, если такого email ещё нет."""
    email = normalize_email(settings.superuser_email)
    async with async_session_maker() as session:
        r = await session.execute(select(User).where(User.email == email))
        if r.scalar_one_or_none() is not None:
            return
        session.add(
            User(
                email=email,
                name=settings.superuser_name,
                role=UserRole.ADMIN,
                password_hash=hash_password(settings.superuser_password),
                is_active=True,
            )
        )
        await session.commit()
        logger.info("Создан администратор: %s", email)


async def seed_demo_catalog():
    """Заполнить каталог демо-данными, если ресторанов ещё нет."""
    async with async_session_maker() as session:
        r = await session.execute(select(Restaurant.id).limit(1))
        if r.scalar_one_or_none() is not None:
            return
        by_key = {}
        for item in DEMO_RESTAURANTS:
            row = Restaurant(name=item["name"], area=item["area"], hero_url=item["hero_url"])
            session.add(row)
            by_key[item["key"]] = row
        await session.flush()
        for item in DEMO_OFFERS:
            restaurant = by_key[item["restaurant"]]
            fields = {k: v for k, v in item.items() if k != "restaurant"}
            fields["category"] = OfferCategory(fields["category"])
            session.add(Offer(restaurant_id=restaurant.id, photo_url=restaurant.hero_url, **fields))
        await session.commit()
        logger.info("Каталог заполнен демо-данными (%s ресторанов, %s предложений)",
                    len(DEMO_RESTAURANTS), len(DEMO_OFFERS))


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Таблицы БД проверены/созданы")
    try:
        await ensure_superuser()
    except SQLAlchemyError as e:
        logger.warning("Администратор: %s", e)
    if settings.seed_demo_data:
        try:
            await seed_demo_catalog()
        except SQLAlchemyError as e:
            logger.warning("Демо-каталог: %s", e)
    yield
    await engine.dispose()


app = FastAPI(title="FoodAble", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{where}: {first.get('msg', 'invalid')}" if where else first.get("msg", "invalid request")
    return JSONResponse(
        status_code=400,
        content={"ok": False, "code": "bad_request", "message": message},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Необработанная ошибка: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "code": "internal_error"},
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(auth_router)
app.include_router(restaurants_router)
app.include_router(reservations_router)
app.include_router(offers_router)
app.include_router(owner_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/health/db")
async def health_db():
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("БД недоступна")
        return JSONResponse(status_code=500, content={"ok": False, "code": "db_unavailable"})
    return {"ok": True}
