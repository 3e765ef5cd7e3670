"""
Бронирование предложений.

Каждая единица бронируется одним условным UPDATE (offer_store.decrement_if_available)
и одной записью в журнале заказов. Проверка существования, проверка остатка и
уменьшение выполняются одной командой, поэтому два одновременных запроса к
предложению с остатком 1 дают ровно один успех и один SOLD_OUT.

reserve_offer и reserve_many сами завершают транзакцию: commit при успехе,
rollback при любой ошибке. После ошибки в БД не остаётся ни уменьшений, ни заказов.
"""
import enum
from typing import Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.core.logging_config import get_logger
from foodable.services import offer_store, order_ledger

logger = get_logger(__name__)


class ReservationErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    SOLD_OUT = "sold_out"
    INSUFFICIENT_QUANTITY = "insufficient_qty"
    BAD_REQUEST = "bad_request"
    INTERNAL_FAILURE = "internal_error"

    @property
    def code(self) -> str:
        return self.value


DEFAULT_MESSAGES = {
    ReservationErrorKind.NOT_FOUND: "Offer not found",
    ReservationErrorKind.SOLD_OUT: "Offer is sold out",
    ReservationErrorKind.INSUFFICIENT_QUANTITY: "Offer does not have enough quantity",
    ReservationErrorKind.BAD_REQUEST: "items[] required",
    ReservationErrorKind.INTERNAL_FAILURE: "Reservation failed",
}


class ReservationError(Exception):
    def __init__(self, kind: ReservationErrorKind, message: str = "", offer_id: str = ""):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.offer_id = offer_id
        super().__init__(self.message)


async def reserve_unit(
    db: AsyncSession,
    offer_id: str,
    shortage: ReservationErrorKind = ReservationErrorKind.SOLD_OUT,
) -> str:
    """
    Одна единица в рамках уже открытой транзакции (без commit).
    Если UPDATE не затронул строку: нет предложения → NOT_FOUND, иначе → shortage.
    """
    if not await offer_store.decrement_if_available(db, offer_id):
        if not await offer_store.offer_exists(db, offer_id):
            raise ReservationError(ReservationErrorKind.NOT_FOUND, offer_id=offer_id)
        raise ReservationError(shortage, offer_id=offer_id)
    return await order_ledger.append_order(db, offer_id)


async def _rollback(db: AsyncSession) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError:
        logger.exception("Откат транзакции бронирования не удался")


async def reserve_offer(db: AsyncSession, offer_id: str) -> str:
    """Забронировать одну единицу. Возвращает id заказа."""
    try:
        order_id = await reserve_unit(db, offer_id)
        await db.commit()
    except ReservationError as e:
        await _rollback(db)
        logger.info("Бронирование отклонено: offer=%s код=%s", offer_id, e.kind.code)
        raise
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.exception("Ошибка БД при бронировании offer=%s", offer_id)
        raise ReservationError(ReservationErrorKind.INTERNAL_FAILURE, offer_id=offer_id) from e
    logger.info("Забронировано: offer=%s order=%s", offer_id, order_id)
    return order_id


async def reserve_many(db: AsyncSession, demands: Mapping[str, int]) -> list[str]:
    """
    Пакетное бронирование: offer_id → число единиц, всё в одной транзакции.
    Единицы идут по предложениям в порядке demands, внутри по одной.
    Первая же неудача откатывает весь пакет, включая уже полностью обслуженные предложения.
    Строки всех предложений пакета блокируются заранее в порядке id, поэтому
    корзины с теми же предложениями в другом порядке не взаимоблокируются.
    """
    created: list[str] = []
    try:
        # Блокировки по возрастанию id, списания в порядке корзины
        await offer_store.lock_offers(db, demands)
        for offer_id, need in demands.items():
            for _ in range(need):
                order_id = await reserve_unit(
                    db, offer_id, shortage=ReservationErrorKind.INSUFFICIENT_QUANTITY
                )
                created.append(order_id)
        await db.commit()
    except ReservationError as e:
        await _rollback(db)
        logger.info(
            "Корзина отклонена: offer=%s код=%s, откатано единиц: %s",
            e.offer_id, e.kind.code, len(created),
        )
        raise
    except SQLAlchemyError as e:
        await _rollback(db)
        logger.exception("Ошибка БД при оформлении корзины, откатано единиц: %s", len(created))
        raise ReservationError(ReservationErrorKind.INTERNAL_FAILURE, "Checkout failed") from e
    logger.info("Корзина оформлена: предложений=%s, заказов=%s", len(demands), len(created))
    return created
