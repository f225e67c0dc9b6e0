from sqlalchemy import Column, String, BigInteger, Integer, ForeignKey, Index
from models.base import Base, TimestampMixin

class Asset(Base, TimestampMixin):
    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    filename = Column(String(255), unique=True, nullable=False)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(128), nullable=False)
    size_bytes = Column(BigInteger, nullable=False)
    storage_path = Column(String(512), nullable=False)

Index("idx_assets_user_id_created_at", Asset.user_id, Asset.created_at.desc())
