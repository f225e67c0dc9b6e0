from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from models.base import Base, TimestampMixin

class Session(Base, TimestampMixin):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Copied from the user at login; usernames never change
    username = Column(String(255), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    ip_address = Column(String(128), nullable=True)
    user_agent = Column(String(512), nullable=True)

Index("idx_sessions_user_id", Session.user_id)
Index("idx_sessions_expires_at", Session.expires_at)
