"""
Domain error taxonomy.

Services raise ServiceError with an ErrorCode; the HTTP status is derived from
the code so routes never pick status codes themselves. Because ServiceError is
an HTTPException, FastAPI renders it without a custom handler:

    {"detail": {"code": "ROOM_NOT_AVAILABLE", "message": "..."}}
"""

from enum import Enum
from typing import Optional

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    LODGING_NOT_FOUND = "LODGING_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    BUSINESS_NOT_FOUND = "BUSINESS_NOT_FOUND"
    PAYMENT_TYPE_NOT_FOUND = "PAYMENT_TYPE_NOT_FOUND"
    INVALID_GUEST_COUNT = "INVALID_GUEST_COUNT"
    ROOM_NOT_AVAILABLE = "ROOM_NOT_AVAILABLE"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    LODGING_NOT_EMPTY = "LODGING_NOT_EMPTY"
    REVIEW_NOT_FOUND = "REVIEW_NOT_FOUND"
    REVIEW_ALREADY_EXISTS = "REVIEW_ALREADY_EXISTS"
    REVIEW_LODGING_MISMATCH = "REVIEW_LODGING_MISMATCH"
    REVIEW_ALREADY_REPORTED = "REVIEW_ALREADY_REPORTED"
    REVIEW_ALREADY_BLOCKED = "REVIEW_ALREADY_BLOCKED"
    FACILITY_NOT_FOUND = "FACILITY_NOT_FOUND"
    NOTICE_NOT_FOUND = "NOTICE_NOT_FOUND"
    PICTURE_NOT_FOUND = "PICTURE_NOT_FOUND"


STATUS_BY_CODE = {
    ErrorCode.ROOM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.LODGING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BUSINESS_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PAYMENT_TYPE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_GUEST_COUNT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ROOM_NOT_AVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_STATUS_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.ACCOUNT_LOCKED: status.HTTP_403_FORBIDDEN,
    ErrorCode.LODGING_NOT_EMPTY: status.HTTP_409_CONFLICT,
    ErrorCode.REVIEW_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REVIEW_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.REVIEW_LODGING_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.REVIEW_ALREADY_REPORTED: status.HTTP_409_CONFLICT,
    ErrorCode.REVIEW_ALREADY_BLOCKED: status.HTTP_409_CONFLICT,
    ErrorCode.FACILITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOTICE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PICTURE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


class ServiceError(HTTPException):
    """A failure with a stable, machine-readable code."""

    def __init__(self, code: ErrorCode, message: Optional[str] = None, headers: Optional[dict] = None):
        self.code = code
        self.message = message or code.value.replace("_", " ").capitalize()
        super().__init__(
            status_code=STATUS_BY_CODE[code],
            detail={"code": code.value, "message": self.message},
            headers=headers,
        )

    def __repr__(self) -> str:
        return f"<ServiceError(code={self.code.value}, message={self.message!r})>"
