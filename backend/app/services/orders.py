import asyncio
import logging
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence

from app.core.config import settings
from app.db.session import SessionLocal
from app.models.order import Order as OrderRow
from app.schemas.booking import Order, Passenger, TicketLine, TrainInfo
from app.services.errors import (
    IncompleteTicketInfo,
    NoPassengerSelected,
    SubmissionFailed,
    SubmissionInProgress,
)

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def gen_order_id(now: Optional[float] = None) -> str:
    """ORDER_<epoch millis>_<9 random base36 chars>; collisions are practically impossible."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"ORDER_{millis}_{suffix}"


class OrderGateway(Protocol):
    async def send(self, order: Order) -> None:
        """Deliver the order; raise on any failure."""

    async def revoke(self, order: Order) -> None:
        """Undo a delivery that completed after the caller gave up on it."""


class DatabaseOrderGateway:
    """Stores submitted orders in the ``orders`` table."""

    def __init__(self, session_id: str, session_factory=SessionLocal):
        self.session_id = session_id
        self._session_factory = session_factory

    def _persist(self, order: Order) -> None:
        db = self._session_factory()
        try:
            db.add(OrderRow(
                order_id=order.order_id,
                session_id=self.session_id,
                train_no=order.train.train_no,
                passenger_count=len(order.passengers),
                total_price=order.total_price,
                submitted_at=order.submitted_at.replace(tzinfo=None),
                status="submitted",
                payload=order.model_dump(mode="json"),
            ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _delete(self, order: Order) -> None:
        db = self._session_factory()
        try:
            db.query(OrderRow).filter(OrderRow.order_id == order.order_id).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def send(self, order: Order) -> None:
        await asyncio.to_thread(self._persist, order)

    async def revoke(self, order: Order) -> None:
        await asyncio.to_thread(self._delete, order)


def validate_order(passengers: Sequence[Passenger], tickets: Sequence[TicketLine]) -> None:
    if not passengers:
        raise NoPassengerSelected()
    if any(not t.seat_class or not t.passenger_name for t in tickets):
        raise IncompleteTicketInfo()


def build_order(train: TrainInfo, passengers: Sequence[Passenger], tickets: Sequence[TicketLine]) -> Order:
    order = Order(
        order_id=gen_order_id(),
        train=train,
        passengers=list(passengers),
        tickets=list(tickets),
        total_price=sum(t.price for t in tickets),
        submitted_at=datetime.now(tz=timezone.utc),
    )
    # Detach from the caller's objects
    return order.model_copy(deep=True)


class OrderSubmitter:
    """Validates and sends one order at a time.

    Only one submission may be in flight; a second ``submit`` while the first is
    pending fails with SubmissionInProgress. A failed or timed out submission
    leaves nothing behind and can be retried.
    """

    def __init__(self, gateway: OrderGateway, timeout: Optional[float] = None):
        self.gateway = gateway
        self.timeout = settings.order_submit_timeout_seconds if timeout is None else timeout
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(self, train: TrainInfo, passengers: Sequence[Passenger], tickets: Sequence[TicketLine]) -> Order:
        if self._in_flight:
            raise SubmissionInProgress()
        validate_order(passengers, tickets)
        order = build_order(train, passengers, tickets)
        self._in_flight = True
        try:
            delivery = asyncio.ensure_future(self.gateway.send(order))
            try:
                await asyncio.wait_for(asyncio.shield(delivery), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.warning("Order %s timed out after %.1fs", order.order_id, self.timeout)
                await self._discard_late_delivery(delivery, order)
                raise SubmissionFailed("Order submission timed out, please retry") from None
        except SubmissionFailed:
            raise
        except Exception as e:
            logger.warning("Order %s submission failed: %s", order.order_id, e)
            raise SubmissionFailed() from e
        finally:
            self._in_flight = False
        logger.info("Order %s submitted: %d ticket(s), total %s", order.order_id, len(order.tickets), order.total_price)
        return order

    async def _discard_late_delivery(self, delivery: "asyncio.Future[None]", order: Order) -> None:
        # A worker thread cannot be cancelled: wait for it (still in flight) and undo a late write
        try:
            await delivery
        except Exception as e:
            logger.info("Timed out order %s never landed: %s", order.order_id, e)
            return
        await self.gateway.revoke(order)
        logger.warning("Revoked order %s that landed after the timeout", order.order_id)
