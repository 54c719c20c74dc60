"""Filtering and ordering of train search results.

Filters are OR within a category and AND across categories; an empty category
does not constrain anything. Sorting is stable in both directions.
"""
import re
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.booking import SeatValue, TrainInfo
from app.services.fares import SEAT_TYPES, SeatType

ALL = "all"
AVAILABLE_TOKEN = "有"
WAITLIST_TOKEN = "候补"

DEPARTURE_TIME_BUCKETS = ("00:00-06:00", "06:00-12:00", "12:00-18:00", "18:00-24:00")
TRAIN_TYPE_CODES = ("GC", "D", "Z", "T", "K", "other")
LIST_CATEGORIES = ("departure_time", "train_types", "departure_stations", "arrival_stations", "seat_types")


class SeatAvailability(str, Enum):
    UNAVAILABLE = "unavailable"
    AVAILABLE = "available"
    WAITLISTED = "waitlisted"


def classify_seat(value: SeatValue) -> SeatAvailability:
    if value is None or value == 0 or value == "0" or value == "":
        return SeatAvailability.UNAVAILABLE
    if isinstance(value, str):
        if value == WAITLIST_TOKEN:
            return SeatAvailability.WAITLISTED
        # "有" and any other marker
        return SeatAvailability.AVAILABLE
    if isinstance(value, bool):
        return SeatAvailability.AVAILABLE if value else SeatAvailability.UNAVAILABLE
    return SeatAvailability.AVAILABLE if value > 0 else SeatAvailability.UNAVAILABLE


def seat_cells(train: TrainInfo) -> List[Tuple[SeatType, SeatValue, SeatAvailability]]:
    """One cell per seat column, in column order."""
    cells = []
    for seat in SEAT_TYPES:
        value = train.seat_availability.get(seat.key)
        cells.append((seat, value, classify_seat(value)))
    return cells


def train_type_code(train: TrainInfo) -> str:
    prefix = (train.train_type or train.train_no)[:1].upper()
    if prefix in ("G", "C"):
        return "GC"
    if prefix in ("D", "Z", "T", "K"):
        return prefix
    return "other"


def train_type_class(train: TrainInfo) -> str:
    code = train_type_code(train)
    if code == "GC":
        return "train-type-g"
    return f"train-type-{code.lower()}"


_HM_RE = re.compile(r"(\d+):(\d+)")
_CN_DURATION_RE = re.compile(r"(?:(\d+)小时)?(?:(\d+)分)?")


def parse_duration(duration: str) -> int:
    """Minutes in an 'H:MM' / 'HH:MM' (or 'X小时Y分') duration; 0 when unparseable."""
    match = _HM_RE.search(duration or "")
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))
    match = _CN_DURATION_RE.fullmatch((duration or "").strip())
    if match and (match.group(1) or match.group(2)):
        return int(match.group(1) or 0) * 60 + int(match.group(2) or 0)
    return 0


class FilterState(BaseModel):
    model_config = ConfigDict(frozen=True)

    departure_time: List[str] = Field(default_factory=list)
    train_types: List[str] = Field(default_factory=list)
    departure_stations: List[str] = Field(default_factory=list)
    arrival_stations: List[str] = Field(default_factory=list)
    seat_types: List[str] = Field(default_factory=list)
    show_discount_trains: bool = False
    show_points_trains: bool = False
    show_all_bookable_trains: bool = False

    def toggle(self, category: str, value: str, checked: bool) -> "FilterState":
        if category not in LIST_CATEGORIES:
            raise ValueError(f"Unknown filter category: {category}")
        current = list(getattr(self, category))
        if checked and value not in current:
            current.append(value)
        elif not checked:
            current = [v for v in current if v != value]
        return self.model_copy(update={category: current})


def _in_bucket(from_time: str, bucket: str) -> bool:
    start, sep, end = bucket.partition("-")
    if not sep:
        return False
    # Fixed-width HH:MM compares lexically
    return start.strip() <= from_time < end.strip()


def _matches_any(values: Sequence[str], test: Callable[[str], bool]) -> bool:
    if not values or ALL in values:
        return True
    return any(test(v) for v in values)


def matches(train: TrainInfo, filters: FilterState) -> bool:
    if not _matches_any(filters.departure_time, lambda b: _in_bucket(train.from_time, b)):
        return False
    if not _matches_any(filters.train_types, lambda code: train_type_code(train) == code):
        return False
    if not _matches_any(filters.departure_stations, lambda s: train.from_station == s):
        return False
    if not _matches_any(filters.arrival_stations, lambda s: train.to_station == s):
        return False
    if not _matches_any(
        filters.seat_types,
        lambda key: classify_seat(train.seat_availability.get(key)) != SeatAvailability.UNAVAILABLE,
    ):
        return False
    toggles = []
    if filters.show_discount_trains:
        toggles.append(train.is_discount)
    if filters.show_points_trains:
        toggles.append(train.supports_points)
    if filters.show_all_bookable_trains:
        toggles.append(train.can_book)
    if toggles and not any(toggles):
        return False
    return True


class SortKey(str, Enum):
    DEPARTURE = "departure"
    ARRIVAL = "arrival"
    DURATION = "duration"
    TRAIN_NO = "trainNo"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


SORT_KEYS: Dict[SortKey, Callable[[TrainInfo], object]] = {
    SortKey.DEPARTURE: lambda t: t.from_time,
    SortKey.ARRIVAL: lambda t: t.to_time,
    SortKey.DURATION: lambda t: parse_duration(t.duration),
    SortKey.TRAIN_NO: lambda t: t.train_no,
}


class SortState(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: SortKey = SortKey.DEPARTURE
    direction: SortDirection = SortDirection.ASC

    def toggle(self, key: SortKey) -> "SortState":
        """Same key flips the direction, a new key starts ascending."""
        if key == self.key:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return SortState(key=key, direction=flipped)
        return SortState(key=key, direction=SortDirection.ASC)


def sort_trains(trains: Sequence[TrainInfo], sort: SortState) -> List[TrainInfo]:
    # list.sort is stable for reverse=True as well
    return sorted(trains, key=SORT_KEYS[sort.key], reverse=sort.direction == SortDirection.DESC)


def view(
    trains: Sequence[TrainInfo],
    filters: Optional[FilterState] = None,
    sort: Optional[SortState] = None,
) -> List[TrainInfo]:
    filters = filters or FilterState()
    kept = [t for t in trains if matches(t, filters)]
    if sort is None:
        return kept
    return sort_trains(kept, sort)
