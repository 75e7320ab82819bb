"""
Business account model: the operator that owns lodgings.

Key design decisions:
- failed_login_attempts / last_login_attempt / is_active drive the login
  lockout (see auth_service.authenticate_business)
- token_version is embedded in issued tokens; bumping it on logout
  invalidates every token issued before
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, CheckConstraint

from hotel_business.db.base import Base, TimestampMixin


class Business(Base, TimestampMixin):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    business_name = Column(String(255), nullable=False)
    owner_name = Column(String(100), nullable=False, default="")
    phone = Column(String(30), nullable=False, default="")
    business_number = Column(String(30), unique=True, nullable=True)
    business_type = Column(String(20), nullable=False, default="hotel")
    address = Column(String(255), nullable=False, default="")
    status = Column(String(20), nullable=False, default="pending", index=True)

    is_active = Column(Boolean, nullable=False, default=True)
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    last_login_attempt = Column(DateTime(timezone=True), nullable=True)
    token_version = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "business_type IN ('hotel', 'motel', 'guesthouse', 'resort', 'etc')",
            name="check_business_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'suspended')",
            name="check_business_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Business(id={self.id}, name={self.business_name}, status={self.status})>"
