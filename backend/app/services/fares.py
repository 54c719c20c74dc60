from typing import Dict, Mapping, NamedTuple, Optional

from app.core.config import settings


class SeatType(NamedTuple):
    key: str
    label: str
    short_label: str


# Column order of the train list
SEAT_TYPES = (
    SeatType("business", "商务座", "商务"),
    SeatType("first_class_plus", "特等座", "特等"),
    SeatType("first_class_premium", "优选一等座", "优选一等"),
    SeatType("first_class", "一等座", "一等"),
    SeatType("second_class", "二等座", "二等"),
    SeatType("second_class_package", "二等包座", "二等包"),
    SeatType("premium_sleeper", "高级软卧", "高软"),
    SeatType("soft_sleeper", "软卧/动卧", "软卧"),
    SeatType("first_sleeper", "一等卧", "一等卧"),
    SeatType("hard_sleeper", "硬卧", "硬卧"),
    SeatType("second_sleeper", "二等卧", "二等卧"),
    SeatType("soft_seat", "软座", "软座"),
    SeatType("hard_seat", "硬座", "硬座"),
    SeatType("no_seat", "无座", "无座"),
    SeatType("other", "其他", "其他"),
)

SEAT_KEYS = tuple(s.key for s in SEAT_TYPES)

BASE_FARES: Dict[str, int] = {
    "business": 1748,
    "first_class": 933,
    "second_class": 553,
    "no_seat": 553,
}


class FareTable:
    """Static seat class -> fare lookup.

    Pricing is best-effort: a seat class missing from the table is charged
    ``default_fare`` instead of being rejected. This is a product policy
    (inherited from the booking page), keep it until pricing owners decide otherwise.
    """

    def __init__(self, fares: Optional[Mapping[str, int]] = None, default_fare: Optional[int] = None):
        self._fares = dict(BASE_FARES if fares is None else fares)
        self.default_fare = settings.default_fare if default_fare is None else default_fare

    def price_of(self, seat_class: str) -> int:
        return self._fares.get(seat_class, self.default_fare)

    def __contains__(self, seat_class: object) -> bool:
        return seat_class in self._fares

    def as_dict(self) -> Dict[str, int]:
        return dict(self._fares)


fare_table = FareTable()
