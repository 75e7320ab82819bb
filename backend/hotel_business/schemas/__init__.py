from hotel_business.schemas.user import (
    UserCreate, UserResponse, UserLogin, Token, BusinessCreate, BusinessResponse,
)
from hotel_business.schemas.lodging import LodgingCreate, LodgingUpdate, LodgingResponse
from hotel_business.schemas.room import RoomCreate, RoomUpdate, RoomResponse, RoomListResponse
from hotel_business.schemas.payment import PaymentResponse, PaymentTypeResponse
from hotel_business.schemas.booking import (
    BookingCreate, BookingResponse, BookingDetail, BookingListResponse,
    BookingStatusUpdate, PaymentStatusUpdate,
)
from hotel_business.schemas.review import (
    ReviewCreate, ReviewReportCreate, ReviewResponse, BlockedReviewList,
    ReviewReportResponse, ReviewReportListResponse,
)
from hotel_business.schemas.facility import FacilityUpsert, FacilityUpdate, FacilityResponse
from hotel_business.schemas.notice import NoticeUpsert, NoticeUpdate, NoticeResponse
from hotel_business.schemas.picture import PictureCreate, PictureResponse, PictureDeleted

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token", "BusinessCreate", "BusinessResponse",
    "LodgingCreate", "LodgingUpdate", "LodgingResponse",
    "RoomCreate", "RoomUpdate", "RoomResponse", "RoomListResponse",
    "PaymentResponse", "PaymentTypeResponse",
    "BookingCreate", "BookingResponse", "BookingDetail", "BookingListResponse",
    "BookingStatusUpdate", "PaymentStatusUpdate",
    "ReviewCreate", "ReviewReportCreate", "ReviewResponse", "BlockedReviewList",
    "ReviewReportResponse", "ReviewReportListResponse",
    "FacilityUpsert", "FacilityUpdate", "FacilityResponse",
    "NoticeUpsert", "NoticeUpdate", "NoticeResponse",
    "PictureCreate", "PictureResponse", "PictureDeleted",
]
