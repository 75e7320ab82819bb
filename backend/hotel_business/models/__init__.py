from hotel_business.models.user import User
from hotel_business.models.business import Business
from hotel_business.models.lodging import Lodging
from hotel_business.models.room import Room
from hotel_business.models.booking import Booking, BookingStatus, PaymentStatus
from hotel_business.models.payment import Payment, PaymentType
from hotel_business.models.review import Review, ReviewReport, ReviewStatus, ReportStatus
from hotel_business.models.facility import Facility
from hotel_business.models.notice import Notice
from hotel_business.models.picture import RoomPicture

__all__ = [
    "User", "Business", "Lodging", "Room",
    "Booking", "BookingStatus", "PaymentStatus",
    "Payment", "PaymentType",
    "Review", "ReviewReport", "ReviewStatus", "ReportStatus",
    "Facility", "Notice", "RoomPicture",
]
