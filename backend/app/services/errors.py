"""Booking domain errors.

Every error carries a stable ``code`` so callers (the HTTP layer, tests, a UI)
can branch on the failure kind without parsing messages.
"""
from typing import Dict, Optional


class BookingError(Exception):
    code = "booking_error"

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or {}


class PassengerValidationError(BookingError):
    code = "invalid_passenger"

    def __init__(self, fields: Dict[str, str]):
        super().__init__("Passenger information is invalid", fields)


class PassengerNotFound(BookingError):
    code = "not_found"

    def __init__(self, passenger_id: str):
        super().__init__(f"Passenger {passenger_id} not found")
        self.passenger_id = passenger_id


class NotSelected(BookingError):
    code = "not_selected"

    def __init__(self, passenger_id: str):
        super().__init__(f"Passenger {passenger_id} is not selected")
        self.passenger_id = passenger_id


class NoPassengerSelected(BookingError):
    code = "no_passenger_selected"

    def __init__(self):
        super().__init__("Please select at least one passenger")


class IncompleteTicketInfo(BookingError):
    code = "incomplete_ticket_info"

    def __init__(self):
        super().__init__("Please complete the ticket information of every passenger")


class SubmissionInProgress(BookingError):
    code = "submission_in_progress"

    def __init__(self):
        super().__init__("An order is already being submitted")


class SubmissionFailed(BookingError):
    code = "submission_failed"

    def __init__(self, reason: str = "Order submission failed, please retry"):
        super().__init__(reason)


class TrainNotFound(BookingError):
    code = "train_not_found"

    def __init__(self, train_no: str):
        super().__init__(f"Train {train_no} not found")
        self.train_no = train_no


class NoActiveDraft(BookingError):
    code = "no_active_draft"

    def __init__(self):
        super().__init__("No train chosen for this order yet")
