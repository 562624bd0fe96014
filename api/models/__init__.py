from models.customer import Customer
from models.booking import Booking, BookingEvent, PARCEL_STATUSES
from models.payment import Payment
from models.feedback import Feedback

__all__ = [
    "Customer", "Booking", "BookingEvent", "PARCEL_STATUSES",
    "Payment", "Feedback",
]
