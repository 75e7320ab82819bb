"""
Notice shown on a room's page: a short announcement, usage guide and
introduction. Each room carries at most one.
"""

from sqlalchemy import Column, Integer, String, ForeignKey

from hotel_business.db.base import Base, TimestampMixin


class Notice(Base, TimestampMixin):
    __tablename__ = "notices"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, unique=True, index=True)
    content = Column(String(100), nullable=False, default="")
    usage_guide = Column(String(100), nullable=False, default="")
    introduction = Column(String(100), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Notice(id={self.id}, room={self.room_id})>"
