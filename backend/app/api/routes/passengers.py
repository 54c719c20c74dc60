from fastapi import APIRouter, Depends, status

from app.api.deps import get_booking_session
from app.schemas.booking import Passenger, PassengerFields
from app.services.sessions import BookingSession

router = APIRouter()

@router.get("", response_model=list[Passenger])
@router.get("/", response_model=list[Passenger])
def list_passengers(session: BookingSession = Depends(get_booking_session)):
    return session.registry.all()

@router.post("", response_model=Passenger, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=Passenger, status_code=status.HTTP_201_CREATED)
def add_passenger(payload: PassengerFields, session: BookingSession = Depends(get_booking_session)):
    return session.registry.add(payload)

@router.put("/{passenger_id}", response_model=Passenger)
def edit_passenger(passenger_id: str, payload: PassengerFields, session: BookingSession = Depends(get_booking_session)):
    """Replace every field of a passenger. Lines already composed keep their snapshot."""
    return session.edit_passenger(passenger_id, payload)

@router.delete("/{passenger_id}")
def remove_passenger(passenger_id: str, session: BookingSession = Depends(get_booking_session)):
    session.remove_passenger(passenger_id)
    return {"status": "deleted"}
