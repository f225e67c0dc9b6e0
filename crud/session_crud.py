from datetime import datetime

from sqlalchemy.orm import Session

from models.session import Session as SessionModel


def get_session_by_token(db: Session, token: str):
    return db.query(SessionModel).filter(SessionModel.token == token).first()


def create_session(
    db: Session,
    user_id: int,
    username: str,
    token: str,
    expires_at: datetime,
    ip_address: str | None = None,
    user_agent: str | None = None,
):
    s = SessionModel(
        user_id=user_id,
        username=username,
        token=token,
        expires_at=expires_at,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def delete_session_by_token(db: Session, token: str) -> bool:
    deleted = db.query(SessionModel).filter(SessionModel.token == token).delete(
        synchronize_session=False
    )
    db.commit()
    return deleted > 0


def delete_expired_sessions(db: Session, now: datetime) -> int:
    deleted = db.query(SessionModel).filter(SessionModel.expires_at < now).delete(
        synchronize_session=False
    )
    db.commit()
    return deleted
