from sqlalchemy import Column, String

from gallery.database import Base


class AdminSession(Base):
    __tablename__ = "admin_sessions"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False)
    link_jti = Column(String, nullable=False, unique=True)
    created_at = Column(String, nullable=False)
    revoked_at = Column(String, nullable=True)
