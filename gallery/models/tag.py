from sqlalchemy import Column, String

from gallery.database import Base


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, unique=True)
