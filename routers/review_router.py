from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import require_session
from core.database import get_db
from core.logger import setup_logger
from crud.review_crud import create_review, delete_review, list_reviews
from schemas.common_schema import OkResponse
from schemas.review_schema import ReviewCreate, ReviewResponse
from schemas.session_schema import SessionRecord

logger = setup_logger(__name__)

router = APIRouter(tags=["Reviews"])


@router.get("/artists/{artist_id}/reviews", response_model=list[ReviewResponse])
def list_for_artist(artist_id: str, db: Session = Depends(get_db)):
    return list_reviews(db, artist_id)


@router.post("/reviews", response_model=ReviewResponse, status_code=201)
def create(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    session: SessionRecord = Depends(require_session),
):
    review = create_review(db, session.user_id, payload)
    logger.info(f"Review {review.id} created by {session.username} for artist {review.artist_id}")
    return review


@router.delete("/reviews/{review_id}", response_model=OkResponse)
def delete(
    review_id: str,
    db: Session = Depends(get_db),
    session: SessionRecord = Depends(require_session),
):
    delete_review(db, session.user_id, review_id)
    logger.info(f"Review {review_id} deleted by {session.username}")
    return OkResponse()
