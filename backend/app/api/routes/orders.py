from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_booking_session
from app.db.session import get_db
from app.models.order import Order as OrderRow
from app.services.sessions import DEFAULT_SEAT_CLASS, BookingSession, OrderDraft
from app.services.trains import get_train, to_train_info

router = APIRouter()

class StartDraftBody(BaseModel):
    train_no: str
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="Travel date YYYY-MM-DD")
    seat_class: str = DEFAULT_SEAT_CLASS

class SeatClassBody(BaseModel):
    seat_class: str

def _draft_out(draft: OrderDraft) -> dict:
    composer = draft.composer
    return {
        "train": draft.train.model_dump(),
        "date": draft.travel_date,
        "seat_class": composer.seat_class,
        "selected_passenger_ids": list(composer.state.selected_ids),
        "tickets": [line.model_dump(mode="json") for line in composer.lines],
        "total_price": composer.total_price(),
    }

@router.post("/draft", status_code=status.HTTP_201_CREATED)
def start_draft(body: StartDraftBody, db: Session = Depends(get_db), session: BookingSession = Depends(get_booking_session)):
    """Start composing an order for a train; replaces any previous draft."""
    run_date = datetime.strptime(body.date, "%Y-%m-%d").date()
    train = to_train_info(get_train(db, body.train_no, run_date))
    draft = session.start_draft(train, body.date, body.seat_class)
    return _draft_out(draft)

@router.get("/draft")
def get_draft(session: BookingSession = Depends(get_booking_session)):
    return _draft_out(session.require_draft())

@router.post("/draft/passengers/{passenger_id}")
def select_passenger(passenger_id: str, session: BookingSession = Depends(get_booking_session)):
    draft = session.require_draft()
    draft.composer.select(passenger_id)
    return _draft_out(draft)

@router.delete("/draft/passengers/{passenger_id}")
def deselect_passenger(passenger_id: str, session: BookingSession = Depends(get_booking_session)):
    draft = session.require_draft()
    draft.composer.deselect(passenger_id)
    return _draft_out(draft)

@router.put("/draft/passengers/{passenger_id}/seat-class")
def change_seat_class(passenger_id: str, body: SeatClassBody, session: BookingSession = Depends(get_booking_session)):
    draft = session.require_draft()
    draft.composer.change_seat_class(passenger_id, body.seat_class)
    return _draft_out(draft)

@router.post("")
@router.post("/")
async def submit_order(session: BookingSession = Depends(get_booking_session)):
    """Submit the current draft.

    On success the draft is consumed. On failure it is kept so the caller can retry.
    """
    order = await session.submit()
    return order.model_dump(mode="json")

@router.get("/{order_id}")
def get_order(order_id: str, db: Session = Depends(get_db), session: BookingSession = Depends(get_booking_session)):
    o = db.query(OrderRow).filter(OrderRow.order_id == order_id, OrderRow.session_id == session.session_id).first()
    if not o:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return {
        **o.payload,
        "status": o.status,
    }
