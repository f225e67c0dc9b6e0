from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import AppError, ErrorKind
from core.logger import setup_logger
from core.security import get_password_hash, verify_password
from models.user import User

logger = setup_logger(__name__)

INVALID_CREDENTIALS = "invalid credentials"


@lru_cache
def _dummy_hash(rounds: int) -> str:
    # Checked against when the username is unknown so both login failures cost one bcrypt check
    return get_password_hash("not-a-real-password", rounds=rounds)


def get_user_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()


def require_credentials(username, password) -> tuple[str, str]:
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise AppError(ErrorKind.INVALID_INPUT, "username and password required")
    return username, password


def create_user(db: Session, username: str, password: str, rounds: int = 12) -> User:
    """Insert a new user; raises CONFLICT when the username is taken.

    The read below only short-circuits the common case. Two concurrent signups
    can both pass it, in which case the unique index on ``users.username``
    rejects the second insert and that is reported as the same conflict.
    """
    if get_user_by_username(db, username) is not None:
        raise AppError(ErrorKind.CONFLICT, "username already taken")

    user = User(username=username, password_hash=get_password_hash(password, rounds=rounds))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Signup lost a race for username {username!r}")
        raise AppError(ErrorKind.CONFLICT, "username already taken")
    db.refresh(user)
    return user


def authenticate_user(db: Session, username: str, password: str, rounds: int = 12) -> User:
    user = get_user_by_username(db, username)
    if user is None:
        verify_password(password, _dummy_hash(rounds))
        raise AppError(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        raise AppError(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)
    return user
