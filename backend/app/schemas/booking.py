from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PassengerClass(str, Enum):
    ADULT = "Adult"
    CHILD = "Child"
    STUDENT = "Student"


class TicketType(str, Enum):
    ADULT = "Adult ticket"
    CHILD = "Child ticket"
    STUDENT = "Student ticket"


# Ticket type is fixed by the passenger class at selection time
TICKET_TYPE_BY_CLASS: Dict[PassengerClass, TicketType] = {
    PassengerClass.ADULT: TicketType.ADULT,
    PassengerClass.CHILD: TicketType.CHILD,
    PassengerClass.STUDENT: TicketType.STUDENT,
}


class PassengerFields(BaseModel):
    name: str = ""
    national_id: str = ""
    phone: str = ""
    passenger_class: PassengerClass = PassengerClass.ADULT


class Passenger(PassengerFields):
    model_config = ConfigDict(frozen=True)

    id: str


class TicketLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    passenger_id: str
    passenger_name: str
    seat_class: str
    ticket_type: TicketType
    price: int


SeatValue = Union[int, str, None]


class TrainInfo(BaseModel):
    """One row of a train search result. Never mutated once received."""
    model_config = ConfigDict(frozen=True)

    train_no: str
    train_type: str
    from_station: str
    to_station: str
    from_time: str
    to_time: str
    duration: str
    from_station_code: str = ""
    to_station_code: str = ""
    seat_availability: Dict[str, SeatValue] = Field(default_factory=dict)
    can_book: bool = True
    is_high_speed: bool = False
    is_discount: bool = False
    supports_points: bool = False
    remarks: Optional[str] = None


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    train: TrainInfo
    passengers: List[Passenger]
    tickets: List[TicketLine]
    total_price: int
    submitted_at: datetime


class SeatInfoItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_seats: int
    available_seats: int
    price: int
    is_available: bool


class TrainDetail(BaseModel):
    """Train detail as served by GET /trains/{trainNumber} (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    train_number: str
    train_type: str
    from_station: str
    to_station: str
    departure_time: str
    arrival_time: str
    duration: str
    seat_info: Dict[str, SeatInfoItem] = Field(default_factory=dict)
