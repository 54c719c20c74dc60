import re
import time
from typing import Dict, Iterable, List, Optional

from app.schemas.booking import Passenger, PassengerFields
from app.services.errors import PassengerNotFound, PassengerValidationError

NATIONAL_ID_RE = re.compile(r"[0-9]{17}[0-9X]")
PHONE_RE = re.compile(r"1[3-9][0-9]{9}")


def validate_passenger_fields(data: PassengerFields) -> Dict[str, str]:
    """Return field -> message for every invalid field (empty when valid)."""
    errors: Dict[str, str] = {}
    if not data.name.strip():
        errors["name"] = "Please enter the passenger name"
    if not data.national_id.strip():
        errors["national_id"] = "Please enter the ID card number"
    elif not NATIONAL_ID_RE.fullmatch(data.national_id):
        errors["national_id"] = "ID card number format is invalid"
    if not data.phone.strip():
        errors["phone"] = "Please enter the mobile number"
    elif not PHONE_RE.fullmatch(data.phone):
        errors["phone"] = "Mobile number format is invalid"
    return errors


def _fields_of(data: PassengerFields) -> dict:
    # Passenger instances are accepted too; their id is not a field to copy
    return data.model_dump(include=set(PassengerFields.model_fields))


class PassengerRegistry:
    """Passengers known to one booking session, in insertion order."""

    def __init__(self, seed: Optional[Iterable[Passenger]] = None):
        self._passengers: Dict[str, Passenger] = {}
        for p in seed or ():
            self._passengers[p.id] = p
        self._last_id = 0

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped when two adds land in the same millisecond
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        while str(candidate) in self._passengers:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def add(self, data: PassengerFields) -> Passenger:
        errors = validate_passenger_fields(data)
        if errors:
            raise PassengerValidationError(errors)
        passenger = Passenger(id=self._next_id(), **_fields_of(data))
        self._passengers[passenger.id] = passenger
        return passenger

    def edit(self, passenger_id: str, data: PassengerFields) -> Passenger:
        if passenger_id not in self._passengers:
            raise PassengerNotFound(passenger_id)
        errors = validate_passenger_fields(data)
        if errors:
            raise PassengerValidationError(errors)
        passenger = Passenger(id=passenger_id, **_fields_of(data))
        self._passengers[passenger_id] = passenger
        return passenger

    def remove(self, passenger_id: str) -> Passenger:
        try:
            return self._passengers.pop(passenger_id)
        except KeyError:
            raise PassengerNotFound(passenger_id) from None

    def get(self, passenger_id: str) -> Passenger:
        try:
            return self._passengers[passenger_id]
        except KeyError:
            raise PassengerNotFound(passenger_id) from None

    def all(self) -> List[Passenger]:
        return list(self._passengers.values())

    def __contains__(self, passenger_id: object) -> bool:
        return passenger_id in self._passengers

    def __len__(self) -> int:
        return len(self._passengers)


def demo_passengers() -> List[Passenger]:
    return [
        Passenger(id="1", name="张三", national_id="110101199001011234", phone="13800138000"),
        Passenger(id="2", name="李四", national_id="110101199501011234", phone="13800138001"),
    ]
