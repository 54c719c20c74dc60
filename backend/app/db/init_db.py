import logging
from datetime import date, timedelta

from app.db.session import engine, SessionLocal
from app.models import order  # noqa: F401
from app.models import train  # noqa: F401
from app.models.base import Base
from app.models.train import Train
from app.services.search import DATE_WINDOW_DAYS

logger = logging.getLogger(__name__)

# (train_no, type, from, to, codes, dep, arr, duration, seats, high_speed, can_book, discount, points, remarks)
DEMO_TRAINS = [
    ("G2", "G", "上海虹桥", "北京南", ("AOH", "VNP"), "09:00", "13:28", "4:28",
     {"business": 8, "first_class": "有", "second_class": "有", "no_seat": 0}, True, True, False, True, None),
    ("G102", "G", "上海虹桥", "北京南", ("AOH", "VNP"), "06:26", "12:29", "6:03",
     {"business": "候补", "first_class": 12, "second_class": "有"}, True, True, True, True, None),
    ("G8", "G", "上海", "北京南", ("SHH", "VNP"), "12:00", "16:36", "4:36",
     {"business": 0, "first_class": "候补", "second_class": 21}, True, True, False, False, None),
    ("D312", "D", "上海", "北京", ("SHH", "BJP"), "19:40", "07:27", "11:47",
     {"soft_sleeper": 5, "second_class": "有", "no_seat": "有"}, True, True, False, True, "动卧"),
    ("C3001", "C", "上海虹桥", "北京南", ("AOH", "VNP"), "14:05", "19:48", "5:43",
     {"first_class": 3, "second_class": 0}, True, False, False, False, "停运"),
    ("Z282", "Z", "上海", "北京", ("SHH", "BJP"), "17:08", "09:22", "16:14",
     {"hard_sleeper": "有", "soft_sleeper": 2, "hard_seat": "有", "no_seat": "有"}, False, True, True, False, None),
    ("T110", "T", "上海", "北京", ("SHH", "BJP"), "20:36", "13:56", "17:20",
     {"hard_sleeper": "候补", "hard_seat": 40}, False, True, False, False, None),
    ("K1234", "K", "上海", "北京", ("SHH", "BJP"), "00:52", "23:05", "22:13",
     {"hard_sleeper": 0, "hard_seat": "有", "no_seat": "有"}, False, True, True, False, None),
]

SEAT_TOTALS = {
    "business": 10, "first_class": 56, "second_class": 400, "no_seat": 100,
    "soft_sleeper": 36, "hard_sleeper": 66, "hard_seat": 118,
}

def create_tables():
    Base.metadata.create_all(bind=engine)

def seed_demo_data(today: date | None = None) -> int:
    """Seed the demo Shanghai -> Beijing timetable around today (idempotent)."""
    today = today or date.today()
    db = SessionLocal()
    try:
        if db.query(Train).count():
            return 0
        rows = []
        for offset in range(-DATE_WINDOW_DAYS, DATE_WINDOW_DAYS + 1):
            run_date = today + timedelta(days=offset)
            for (no, kind, frm, to, codes, dep, arr, dur, seats, hs, book, disc, pts, rem) in DEMO_TRAINS:
                rows.append(Train(
                    train_no=no, train_type=kind, from_station=frm, to_station=to,
                    from_station_code=codes[0], to_station_code=codes[1], run_date=run_date,
                    from_time=dep, to_time=arr, duration=dur, seats=dict(seats),
                    seat_totals={k: SEAT_TOTALS.get(k, 0) for k in seats},
                    prices={}, can_book=book, is_high_speed=hs, is_discount=disc,
                    supports_points=pts, remarks=rem,
                ))
        db.add_all(rows)
        db.commit()
        return len(rows)
    finally:
        db.close()
