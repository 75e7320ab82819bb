"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from hotel_business.api.routes import (
    auth,
    bookings,
    facilities,
    lodgings,
    notices,
    payment_types,
    pictures,
    reviews,
    rooms,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(lodgings.router)
api_router.include_router(rooms.router)
api_router.include_router(bookings.router)
api_router.include_router(payment_types.router)
api_router.include_router(reviews.router)
api_router.include_router(facilities.router)
api_router.include_router(notices.router)
api_router.include_router(pictures.router)
