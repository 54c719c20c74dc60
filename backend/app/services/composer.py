"""Ticket composition.

The ticket lines of an order are derived state: a pure function of which
passengers are selected and which seat class each line uses. ``reduce`` applies
one event to an immutable ``ComposerState``; ``TicketComposer`` keeps the
current state and the event log for one booking session.
"""
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple, Union

from app.schemas.booking import TICKET_TYPE_BY_CLASS, Passenger, TicketLine
from app.services.errors import NotSelected
from app.services.fares import FareTable, fare_table
from app.services.passengers import PassengerRegistry


@dataclass(frozen=True)
class Select:
    passenger: Passenger


@dataclass(frozen=True)
class Deselect:
    passenger_id: str


@dataclass(frozen=True)
class ChangeSeatClass:
    passenger_id: str
    seat_class: str


ComposerEvent = Union[Select, Deselect, ChangeSeatClass]


@dataclass(frozen=True)
class ComposerState:
    # Seat class currently shown for the train; new lines start with it
    seat_class: str
    # Passenger snapshots and their lines, index-aligned
    passengers: Tuple[Passenger, ...] = ()
    lines: Tuple[TicketLine, ...] = ()

    @property
    def selected_ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.passengers)

    def is_selected(self, passenger_id: str) -> bool:
        return passenger_id in self.selected_ids

    def total_price(self) -> int:
        return sum(line.price for line in self.lines)


def ticket_line_for(passenger: Passenger, seat_class: str, fares: FareTable) -> TicketLine:
    return TicketLine(
        passenger_id=passenger.id,
        passenger_name=passenger.name,
        seat_class=seat_class,
        ticket_type=TICKET_TYPE_BY_CLASS[passenger.passenger_class],
        price=fares.price_of(seat_class),
    )


def reduce(state: ComposerState, event: ComposerEvent, fares: FareTable = fare_table) -> ComposerState:
    if isinstance(event, Select):
        if state.is_selected(event.passenger.id):
            return state
        line = ticket_line_for(event.passenger, state.seat_class, fares)
        return replace(state, passengers=state.passengers + (event.passenger,), lines=state.lines + (line,))

    if isinstance(event, Deselect):
        if not state.is_selected(event.passenger_id):
            return state
        keep = [i for i, p in enumerate(state.passengers) if p.id != event.passenger_id]
        return replace(
            state,
            passengers=tuple(state.passengers[i] for i in keep),
            lines=tuple(state.lines[i] for i in keep),
        )

    if isinstance(event, ChangeSeatClass):
        if not state.is_selected(event.passenger_id):
            raise NotSelected(event.passenger_id)
        lines = tuple(
            line.model_copy(update={"seat_class": event.seat_class, "price": fares.price_of(event.seat_class)})
            if line.passenger_id == event.passenger_id else line
            for line in state.lines
        )
        return replace(state, lines=lines)

    raise TypeError(f"Unknown composer event: {event!r}")


@dataclass
class TicketComposer:
    registry: PassengerRegistry
    seat_class: str
    fares: FareTable = fare_table
    state: ComposerState = field(init=False)
    events: List[ComposerEvent] = field(init=False, default_factory=list)

    def __post_init__(self):
        self.state = ComposerState(seat_class=self.seat_class)

    def _apply(self, event: ComposerEvent) -> ComposerState:
        self.state = reduce(self.state, event, self.fares)
        self.events.append(event)
        return self.state

    def select(self, passenger_id: str) -> ComposerState:
        # Snapshot taken here; later registry edits do not reach existing lines
        return self._apply(Select(self.registry.get(passenger_id)))

    def deselect(self, passenger_id: str) -> ComposerState:
        return self._apply(Deselect(passenger_id))

    def toggle(self, passenger_id: str) -> ComposerState:
        if self.state.is_selected(passenger_id):
            return self.deselect(passenger_id)
        return self.select(passenger_id)

    def change_seat_class(self, passenger_id: str, seat_class: str) -> ComposerState:
        return self._apply(ChangeSeatClass(passenger_id, seat_class))

    def reset(self, seat_class: Optional[str] = None) -> None:
        if seat_class is not None:
            self.seat_class = seat_class
        self.state = ComposerState(seat_class=self.seat_class)
        self.events.clear()

    @property
    def lines(self) -> List[TicketLine]:
        return list(self.state.lines)

    @property
    def selected_passengers(self) -> List[Passenger]:
        return list(self.state.passengers)

    def total_price(self) -> int:
        return self.state.total_price()
