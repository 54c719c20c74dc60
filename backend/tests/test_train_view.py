import pytest

from app.schemas.booking import TrainInfo
from app.services.train_view import (
    FilterState,
    SeatAvailability,
    SortDirection,
    SortKey,
    SortState,
    classify_seat,
    parse_duration,
    seat_cells,
    train_type_class,
    view,
)


def train(no, dep="08:00", arr="12:00", dur="4:00", frm="上海虹桥", to="北京南", seats=None, **kw):
    return TrainInfo(
        train_no=no, train_type=no[0], from_station=frm, to_station=to,
        from_time=dep, to_time=arr, duration=dur, seat_availability=seats or {}, **kw,
    )


TRAINS = [
    train("G2", dep="09:00", arr="13:28", dur="4:28", seats={"second_class": "有", "business": 0}),
    train("D312", dep="19:40", arr="07:27", dur="11:47", frm="上海", to="北京", seats={"soft_sleeper": 5}),
    train("K1234", dep="00:52", arr="23:05", dur="22:13", frm="上海", to="北京", seats={"hard_seat": "候补"},
          can_book=False),
    train("C3001", dep="14:05", arr="19:48", dur="5:43", seats={"first_class": 3}, is_discount=True),
    train("Z282", dep="06:00", arr="09:22", dur="3:22", frm="上海", to="北京", supports_points=True),
]


def numbers(trains):
    return [t.train_no for t in trains]


@pytest.mark.parametrize("value,expected", [
    (None, SeatAvailability.UNAVAILABLE),
    (0, SeatAvailability.UNAVAILABLE),
    ("0", SeatAvailability.UNAVAILABLE),
    ("有", SeatAvailability.AVAILABLE),
    ("候补", SeatAvailability.WAITLISTED),
    (12, SeatAvailability.AVAILABLE),
    ("*", SeatAvailability.AVAILABLE),
])
def test_classify_seat(value, expected):
    assert classify_seat(value) == expected


def test_seat_cells_cover_every_column():
    cells = seat_cells(TRAINS[0])
    assert len(cells) == 15
    assert cells[0][0].key == "business" and cells[0][2] == SeatAvailability.UNAVAILABLE
    second = next(c for c in cells if c[0].key == "second_class")
    assert second[2] == SeatAvailability.AVAILABLE


def test_parse_duration():
    assert parse_duration("4:30") == 270
    assert parse_duration("10:05") == 605
    assert parse_duration("4小时30分") == 270
    assert parse_duration("garbage") == 0


def test_sort_by_duration():
    trains = [train("A", dur="4:30"), train("B", dur="2:15"), train("C", dur="10:05")]
    result = view(trains, sort=SortState(key=SortKey.DURATION))
    assert [t.duration for t in result] == ["2:15", "4:30", "10:05"]


def test_sort_by_departure_arrival_and_number():
    assert numbers(view(TRAINS, sort=SortState())) == ["K1234", "Z282", "G2", "C3001", "D312"]
    assert numbers(view(TRAINS, sort=SortState(key=SortKey.ARRIVAL))) == ["D312", "Z282", "G2", "C3001", "K1234"]
    desc = SortState(key=SortKey.TRAIN_NO, direction=SortDirection.DESC)
    assert numbers(view(TRAINS, sort=desc)) == ["Z282", "K1234", "G2", "D312", "C3001"]


def test_sort_is_stable_both_directions():
    trains = [train("G1", dep="08:00"), train("G2", dep="07:00"), train("G3", dep="08:00"), train("G4", dep="08:00")]
    asc = view(trains, sort=SortState())
    assert numbers(asc) == ["G2", "G1", "G3", "G4"]
    desc = view(trains, sort=SortState(direction=SortDirection.DESC))
    assert numbers(desc) == ["G1", "G3", "G4", "G2"]


def test_sort_toggle():
    s = SortState()
    flipped = s.toggle(SortKey.DEPARTURE)
    assert flipped.direction == SortDirection.DESC
    assert flipped.toggle(SortKey.DEPARTURE) == s
    assert flipped.toggle(SortKey.DURATION) == SortState(key=SortKey.DURATION, direction=SortDirection.ASC)
    twice = flipped.toggle(SortKey.DEPARTURE)
    assert view(TRAINS, sort=twice) == view(TRAINS, sort=s)


def test_empty_filters_are_identity():
    assert view(TRAINS, FilterState()) == TRAINS


def test_or_within_and_across_categories():
    f = FilterState(train_types=["GC", "D"])
    assert numbers(view(TRAINS, f)) == ["G2", "D312", "C3001"]
    f = f.toggle("departure_stations", "上海虹桥", True)
    assert numbers(view(TRAINS, f)) == ["G2", "C3001"]
    f = f.toggle("departure_time", "12:00-18:00", True)
    assert numbers(view(TRAINS, f)) == ["C3001"]


def test_single_value_category():
    assert numbers(view(TRAINS, FilterState(arrival_stations=["北京"]))) == ["D312", "K1234", "Z282"]
    assert numbers(view(TRAINS, FilterState(train_types=["other"]))) == []
    assert numbers(view(TRAINS, FilterState(train_types=["all"]))) == numbers(TRAINS)


def test_departure_buckets_are_half_open():
    assert numbers(view(TRAINS, FilterState(departure_time=["00:00-06:00"]))) == ["K1234"]
    assert numbers(view(TRAINS, FilterState(departure_time=["06:00-12:00"]))) == ["G2", "Z282"]


def test_seat_type_filter_counts_waitlist_as_open():
    assert numbers(view(TRAINS, FilterState(seat_types=["business"]))) == []
    assert numbers(view(TRAINS, FilterState(seat_types=["hard_seat", "first_class"]))) == ["K1234", "C3001"]


def test_toggles():
    assert numbers(view(TRAINS, FilterState(show_all_bookable_trains=True))) == ["G2", "D312", "C3001", "Z282"]
    assert numbers(view(TRAINS, FilterState(show_discount_trains=True, show_points_trains=True))) == ["C3001", "Z282"]


def test_filter_toggle_add_remove():
    f = FilterState().toggle("seat_types", "business", True).toggle("seat_types", "business", True)
    assert f.seat_types == ["business"]
    assert f.toggle("seat_types", "business", False).seat_types == []


def test_train_type_class():
    assert train_type_class(TRAINS[0]) == "train-type-g"
    assert train_type_class(TRAINS[3]) == "train-type-g"
    assert train_type_class(TRAINS[2]) == "train-type-k"
    assert train_type_class(train("Y1")) == "train-type-other"


@pytest.mark.parametrize("category", ["seat_type", "show_discount_trains"])
def test_filter_toggle_rejects_non_list_categories(category):
    with pytest.raises(ValueError):
        FilterState().toggle(category, "business", True)
