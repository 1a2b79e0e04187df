import enum

from sqlalchemy import Column, String, Integer, JSON, CheckConstraint, Index

from gallery.database import Base


class PhotoStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Photo(Base):
    __tablename__ = "photos"
    __table_args__ = (
        CheckConstraint("like_count >= 0", name="ck_photos_like_count_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_photos_status"
        ),
        Index("ix_photos_status_created_at", "status", "created_at"),
    )

    id = Column(String, primary_key=True)
    title = Column(String, nullable=True)
    location = Column(String, nullable=True)
    image_path = Column(String, nullable=False)
    status = Column(String, nullable=False, default=PhotoStatus.PENDING.value)
    like_count = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(String, nullable=False)
