from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.train import Train
from app.schemas.booking import SeatInfoItem, TrainDetail, TrainInfo
from app.services.errors import TrainNotFound
from app.services.fares import FareTable, fare_table
from app.services.train_view import SeatAvailability, classify_seat


def _like_prefix(value: str) -> str:
    # avoid wildcard injection
    return value.replace("%", "").replace("_", "") + "%"


def to_train_info(t: Train) -> TrainInfo:
    return TrainInfo(
        train_no=t.train_no,
        train_type=t.train_type,
        from_station=t.from_station,
        to_station=t.to_station,
        from_time=t.from_time,
        to_time=t.to_time,
        duration=t.duration,
        from_station_code=t.from_station_code or "",
        to_station_code=t.to_station_code or "",
        seat_availability=dict(t.seats or {}),
        can_book=t.can_book,
        is_high_speed=t.is_high_speed,
        is_discount=t.is_discount,
        supports_points=t.supports_points,
        remarks=t.remarks,
    )


def to_train_detail(t: Train, fares: FareTable = fare_table) -> TrainDetail:
    seat_info = {}
    totals = t.seat_totals or {}
    prices = t.prices or {}
    for key, value in (t.seats or {}).items():
        state = classify_seat(value)
        available = value if isinstance(value, int) and not isinstance(value, bool) and value > 0 else 0
        seat_info[key] = SeatInfoItem(
            total_seats=int(totals.get(key, available)),
            available_seats=available,
            price=int(prices.get(key, fares.price_of(key))),
            is_available=state == SeatAvailability.AVAILABLE,
        )
    return TrainDetail(
        train_number=t.train_no,
        train_type=t.train_type,
        from_station=t.from_station,
        to_station=t.to_station,
        departure_time=t.from_time,
        arrival_time=t.to_time,
        duration=t.duration,
        seat_info=seat_info,
    )


def search_trains(
    db: Session,
    run_date: date,
    from_station: Optional[str] = None,
    to_station: Optional[str] = None,
    high_speed_only: bool = False,
) -> List[TrainInfo]:
    q = db.query(Train).filter(Train.run_date == run_date)
    if from_station:
        q = q.filter(Train.from_station.like(_like_prefix(from_station)))
    if to_station:
        q = q.filter(Train.to_station.like(_like_prefix(to_station)))
    if high_speed_only:
        q = q.filter(Train.is_high_speed.is_(True))
    return [to_train_info(t) for t in q.order_by(Train.id).all()]


def get_train(db: Session, train_no: str, run_date: Optional[date] = None) -> Train:
    q = db.query(Train).filter(Train.train_no == train_no)
    if run_date is not None:
        q = q.filter(Train.run_date == run_date)
    t = q.order_by(Train.run_date).first()
    if not t:
        raise TrainNotFound(train_no)
    return t
