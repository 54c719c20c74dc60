from dataclasses import dataclass, field
from typing import Dict, Optional

from app.schemas.booking import Order, Passenger, PassengerFields, TrainInfo
from app.services.composer import TicketComposer
from app.services.errors import NoActiveDraft
from app.services.fares import fare_table
from app.services.orders import DatabaseOrderGateway, OrderGateway, OrderSubmitter
from app.services.passengers import PassengerRegistry, demo_passengers

DEFAULT_SEAT_CLASS = "second_class"


@dataclass
class OrderDraft:
    train: TrainInfo
    travel_date: str
    composer: TicketComposer


@dataclass
class BookingSession:
    """Registry, draft order and submitter owned by one browser session."""
    session_id: str
    registry: PassengerRegistry
    submitter: OrderSubmitter
    draft: Optional[OrderDraft] = None
    orders: list = field(default_factory=list)

    def start_draft(self, train: TrainInfo, travel_date: str, seat_class: str = DEFAULT_SEAT_CLASS) -> OrderDraft:
        self.draft = OrderDraft(
            train=train,
            travel_date=travel_date,
            composer=TicketComposer(registry=self.registry, seat_class=seat_class, fares=fare_table),
        )
        return self.draft

    def require_draft(self) -> OrderDraft:
        if self.draft is None:
            raise NoActiveDraft()
        return self.draft

    def remove_passenger(self, passenger_id: str) -> Passenger:
        removed = self.registry.remove(passenger_id)
        if self.draft is not None:
            self.draft.composer.deselect(passenger_id)
        return removed

    def edit_passenger(self, passenger_id: str, data: PassengerFields) -> Passenger:
        return self.registry.edit(passenger_id, data)

    async def submit(self) -> Order:
        draft = self.require_draft()
        composer = draft.composer
        order = await self.submitter.submit(draft.train, composer.selected_passengers, composer.lines)
        # Consumed; a failed submission keeps the draft for retry.
        # A draft started while this one was in flight stays.
        if self.draft is draft:
            self.draft = None
        self.orders.append(order.order_id)
        return order


class SessionStore:
    def __init__(self, gateway_factory=None):
        self._sessions: Dict[str, BookingSession] = {}
        self._gateway_factory = gateway_factory or (lambda session_id: DatabaseOrderGateway(session_id))

    def create(self, session_id: str) -> BookingSession:
        gateway: OrderGateway = self._gateway_factory(session_id)
        session = BookingSession(
            session_id=session_id,
            registry=PassengerRegistry(seed=demo_passengers()),
            submitter=OrderSubmitter(gateway),
        )
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[BookingSession]:
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: str) -> BookingSession:
        return self._sessions.get(session_id) or self.create(session_id)

    def drop(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def clear(self) -> None:
        self._sessions.clear()


store = SessionStore()
