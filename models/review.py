from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index
from models.base import Base, TimestampMixin

class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    artist_id = Column(String(64), nullable=False)
    artist_name = Column(String(255), nullable=False)
    artist_description = Column(Text, nullable=False, default="")
    artist_picture = Column(String(512), nullable=False, default="")
    album_title = Column(String(255), nullable=False, default="")
    track_title = Column(String(255), nullable=False)
    track_length = Column(String(32), nullable=False, default="")
    track_artwork = Column(String(512), nullable=False, default="")
    review_title = Column(String(255), nullable=False)
    review_description = Column(Text, nullable=False)
    star_rating = Column(Integer, nullable=False, default=1)

Index("idx_reviews_artist_id_created_at", Review.artist_id, Review.created_at.desc())
Index("idx_reviews_user_id", Review.user_id)
