"""
Guest account model. Guests make bookings; they never own lodgings.
"""

from sqlalchemy import Column, Integer, String, Boolean

from hotel_business.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False, default="")
    is_active = Column(Boolean, default=True, nullable=False)
    # Platform operators; granted out of band, never through the API
    is_admin = Column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
