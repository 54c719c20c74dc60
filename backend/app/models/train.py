from sqlalchemy import String, Integer, Boolean, JSON, Date
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date

from app.models.base import Base

class Train(Base):
    __tablename__ = "trains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    train_no: Mapped[str] = mapped_column(String(16), index=True)
    train_type: Mapped[str] = mapped_column(String(16))
    from_station: Mapped[str] = mapped_column(String(64), index=True)
    to_station: Mapped[str] = mapped_column(String(64), index=True)
    from_station_code: Mapped[str] = mapped_column(String(8), default="")
    to_station_code: Mapped[str] = mapped_column(String(8), default="")
    run_date: Mapped[date] = mapped_column(Date, index=True)
    from_time: Mapped[str] = mapped_column(String(5))  # HH:MM
    to_time: Mapped[str] = mapped_column(String(5))
    duration: Mapped[str] = mapped_column(String(8))  # H:MM
    # seat key -> remaining count, "有" or "候补"
    seats: Mapped[dict] = mapped_column(JSON, default=dict)
    # seat key -> total seats in the class
    seat_totals: Mapped[dict] = mapped_column(JSON, default=dict)
    # seat key -> fare; classes missing here are priced by the fare table
    prices: Mapped[dict] = mapped_column(JSON, default=dict)
    can_book: Mapped[bool] = mapped_column(Boolean, default=True)
    is_high_speed: Mapped[bool] = mapped_column(Boolean, default=False)
    is_discount: Mapped[bool] = mapped_column(Boolean, default=False)
    supports_points: Mapped[bool] = mapped_column(Boolean, default=False)
    remarks: Mapped[str | None] = mapped_column(String(255), nullable=True)
