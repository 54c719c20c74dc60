from datetime import date as date_type
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.search import SearchConditions, SearchTrainType, date_options
from app.services.train_view import FilterState, SortDirection, SortKey, SortState, seat_cells, train_type_class, view
from app.services.trains import get_train, search_trains, to_train_detail

router = APIRouter()

def _split(v: str | None) -> list[str]:
    if not v:
        return []
    return [p.strip() for p in v.split(",") if p.strip()]

def _parse_date(value: str | None) -> date_type:
    if not value:
        return date_type.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date format, expected YYYY-MM-DD")

@router.get("")
@router.get("/")
def list_trains(
    db: Session = Depends(get_db),
    from_station: str | None = Query(None, description="Departure city or station prefix"),
    to_station: str | None = Query(None, description="Arrival city or station prefix"),
    date: str | None = Query(None, description="Departure date YYYY-MM-DD (default today)"),
    train_type: SearchTrainType = Query(SearchTrainType.ALL),
    departure_time: str | None = Query(None, description="Comma separated departure buckets, e.g. 06:00-12:00"),
    train_types: str | None = Query(None, description="Comma separated train type codes: GC,D,Z,T,K,other"),
    departure_stations: str | None = Query(None, description="Comma separated departure stations"),
    arrival_stations: str | None = Query(None, description="Comma separated arrival stations"),
    seat_types: str | None = Query(None, description="Comma separated seat keys with seats left"),
    show_discount_trains: bool = False,
    show_points_trains: bool = False,
    show_all_bookable_trains: bool = False,
    sort: SortKey = Query(SortKey.DEPARTURE),
    direction: SortDirection = Query(SortDirection.ASC),
):
    run_date = _parse_date(date)
    conditions = None
    if from_station and to_station:
        conditions = SearchConditions(from_station=from_station, to_station=to_station, depart_date=run_date, train_type=train_type)
    trains = search_trains(
        db,
        run_date,
        from_station=from_station,
        to_station=to_station,
        high_speed_only=train_type == SearchTrainType.HIGH_SPEED,
    )
    filters = FilterState(
        departure_time=_split(departure_time),
        train_types=_split(train_types),
        departure_stations=_split(departure_stations),
        arrival_stations=_split(arrival_stations),
        seat_types=_split(seat_types),
        show_discount_trains=show_discount_trains,
        show_points_trains=show_points_trains,
        show_all_bookable_trains=show_all_bookable_trains,
    )
    items = view(trains, filters, SortState(key=sort, direction=direction))
    return {
        "items": [
            {
                **t.model_dump(),
                "type_class": train_type_class(t),
                "seats": [
                    {"key": seat.key, "label": seat.short_label, "value": value, "availability": state.value}
                    for seat, value, state in seat_cells(t)
                ],
            }
            for t in items
        ],
        "total": len(items),
        "date": run_date.isoformat(),
        "conditions": conditions.model_dump(mode="json") if conditions else None,
    }

@router.get("/dates")
def list_dates():
    return {"items": [o.model_dump() for o in date_options()]}

@router.get("/{train_number}")
def train_detail(train_number: str, date: str | None = Query(None), db: Session = Depends(get_db)):
    run_date = _parse_date(date) if date else None
    t = get_train(db, train_number, run_date)
    return {"data": {"train": to_train_detail(t).model_dump(by_alias=True)}}
