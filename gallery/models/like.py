from sqlalchemy import Column, String, ForeignKey

from gallery.database import Base


class Like(Base):
    __tablename__ = "likes"

    # Composite primary key: one like per visitor per photo.
    photo_id = Column(String, ForeignKey("photos.id"), primary_key=True)
    anon_fingerprint = Column(String, primary_key=True)
    created_at = Column(String, nullable=False)
