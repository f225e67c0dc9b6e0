import re

from sqlalchemy import desc
from sqlalchemy.orm import Session

from core.errors import AppError, ErrorKind
from core.logger import setup_logger
from models.review import Review
from models.user import User
from schemas.review_schema import ReviewCreate, ReviewResponse

logger = setup_logger(__name__)

REQUIRED_FIELDS = ("artist_id", "artist_name", "track_title", "review_title", "review_description")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_star_rating(value) -> int:
    """Leading integer of ``value`` clamped to 1..5; anything unparseable counts as 1."""
    if value is None or isinstance(value, bool):
        rating = 1
    elif isinstance(value, int):
        rating = value
    elif isinstance(value, float):
        rating = int(value) if value == value and abs(value) != float("inf") else 1
    else:
        match = _LEADING_INT.match(str(value))
        rating = int(match.group(1)) if match else 1
    return max(1, min(5, rating))


def _is_text_like(value) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _is_blank(value) -> bool:
    """Missing, non-text, whitespace-only or numeric zero."""
    if not _is_text_like(value):
        return True
    if isinstance(value, str):
        return not value.strip()
    return value == 0


def _text(value) -> str:
    return "" if value is None else str(value)


def _with_username(review: Review, username: str) -> ReviewResponse:
    data = {column.name: getattr(review, column.name) for column in Review.__table__.columns}
    data["username"] = username
    return ReviewResponse.model_validate(data)


def _reviews_with_username(db: Session):
    return db.query(Review, User.username).join(User, User.id == Review.user_id)


def get_review(db: Session, review_id: int) -> ReviewResponse | None:
    row = _reviews_with_username(db).filter(Review.id == review_id).first()
    if row is None:
        return None
    return _with_username(*row)


def list_reviews(db: Session, artist_id: str) -> list[ReviewResponse]:
    rows = (
        _reviews_with_username(db)
        .filter(Review.artist_id == artist_id)
        .order_by(desc(Review.created_at), desc(Review.id))
        .all()
    )
    return [_with_username(review, username) for review, username in rows]


def create_review(db: Session, user_id: int, payload: ReviewCreate) -> ReviewResponse:
    if any(_is_blank(getattr(payload, field)) for field in REQUIRED_FIELDS):
        raise AppError(ErrorKind.INVALID_INPUT, "missing required fields")
    # starRating is parsed leniently instead
    text_fields = payload.model_dump(exclude={"star_rating"}).values()
    if any(value is not None and not _is_text_like(value) for value in text_fields):
        raise AppError(ErrorKind.INVALID_INPUT, "invalid review fields")

    review = Review(
        user_id=user_id,
        artist_id=_text(payload.artist_id),
        artist_name=_text(payload.artist_name),
        artist_description=_text(payload.artist_description),
        artist_picture=_text(payload.artist_picture),
        album_title=_text(payload.album_title),
        track_title=_text(payload.track_title),
        track_length=_text(payload.track_length),
        track_artwork=_text(payload.track_artwork),
        review_title=_text(payload.review_title),
        review_description=_text(payload.review_description),
        star_rating=parse_star_rating(payload.star_rating),
    )
    db.add(review)
    db.flush()
    review_id = review.id
    db.commit()

    # Separate read; the row may already be gone if its owner deleted it meanwhile
    created = get_review(db, review_id)
    if created is None:
        logger.error(f"Review {review_id} vanished between insert and re-fetch")
        raise AppError(ErrorKind.INTERNAL, "review not found after insert")
    return created


def delete_review(db: Session, requester_id: int, review_id) -> None:
    """Delete a review owned by ``requester_id``.

    Raises NOT_FOUND for unknown (or non-numeric) ids and FORBIDDEN when the
    review belongs to someone else.
    """
    try:
        review_pk = int(review_id)
    except (TypeError, ValueError):
        raise AppError(ErrorKind.NOT_FOUND, "not found")

    review = db.query(Review).filter(Review.id == review_pk).first()
    if review is None:
        raise AppError(ErrorKind.NOT_FOUND, "not found")
    if review.user_id != requester_id:
        raise AppError(ErrorKind.FORBIDDEN, "forbidden")

    db.delete(review)
    db.commit()
