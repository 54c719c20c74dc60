from datetime import date, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

WEEKDAYS = ("一", "二", "三", "四", "五", "六", "日")
DATE_WINDOW_DAYS = 7


class SearchPassengerType(str, Enum):
    ADULT = "adult"
    STUDENT = "student"


class SearchTrainType(str, Enum):
    ALL = "all"
    HIGH_SPEED = "high_speed"


class SearchConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_station: str
    to_station: str
    depart_date: date
    passenger_type: SearchPassengerType = SearchPassengerType.ADULT
    train_type: SearchTrainType = SearchTrainType.ALL

    def swap_stations(self) -> "SearchConditions":
        return self.model_copy(update={"from_station": self.to_station, "to_station": self.from_station})


class DateOption(BaseModel):
    value: str
    display: str
    week_day: str
    is_today: bool


def date_options(today: Optional[date] = None) -> List[DateOption]:
    """Selectable departure dates: a week either side of today."""
    today = today or date.today()
    options = []
    for offset in range(-DATE_WINDOW_DAYS, DATE_WINDOW_DAYS + 1):
        d = today + timedelta(days=offset)
        options.append(DateOption(
            value=d.isoformat(),
            display=d.strftime("%m-%d"),
            week_day=f"周{WEEKDAYS[d.weekday()]}",
            is_today=offset == 0,
        ))
    return options
