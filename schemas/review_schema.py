from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReviewCreate(BaseModel):
    """Incoming review fields, sent by clients in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    artist_id: Any = None
    artist_name: Any = None
    artist_description: Any = None
    artist_picture: Any = None
    album_title: Any = None
    track_title: Any = None
    track_length: Any = None
    track_artwork: Any = None
    review_title: Any = None
    review_description: Any = None
    star_rating: Any = None


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    artist_id: str
    artist_name: str
    artist_description: str
    artist_picture: str
    album_title: str
    track_title: str
    track_length: str
    track_artwork: str
    review_title: str
    review_description: str
    star_rating: int
    created_at: datetime | None = None
    username: str

    model_config = {"from_attributes": True}
