"""
Room picture records. Only the name and URL are stored; uploading the image
itself happens outside this service.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Index

from hotel_business.db.base import Base, TimestampMixin


class RoomPicture(Base, TimestampMixin):
    __tablename__ = "room_pictures"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    picture_name = Column(String(100), nullable=False)
    picture_url = Column(String(200), nullable=False)

    __table_args__ = (
        Index("ix_room_pictures_room_created", "room_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<RoomPicture(id={self.id}, room={self.room_id}, name={self.picture_name})>"
