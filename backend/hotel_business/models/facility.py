"""
Facility: the service a lodging advertises (parking, breakfast, ...).
Each lodging carries at most one.
"""

from sqlalchemy import Column, Integer, String, ForeignKey

from hotel_business.db.base import Base, TimestampMixin


class Facility(Base, TimestampMixin):
    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, index=True)
    lodging_id = Column(Integer, ForeignKey("lodgings.id"), nullable=False, unique=True, index=True)
    service_name = Column(String(50), nullable=False)
    service_detail = Column(String(100), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Facility(id={self.id}, lodging={self.lodging_id}, name={self.service_name})>"
