"""
Lodging model: a property owned by exactly one business.
"""

from sqlalchemy import Column, Integer, String, ForeignKey

from hotel_business.db.base import Base, TimestampMixin


class Lodging(Base, TimestampMixin):
    __tablename__ = "lodgings"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False)
    region = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=False, default="")
    description = Column(String(2000), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Lodging(id={self.id}, business={self.business_id}, name={self.name})>"
