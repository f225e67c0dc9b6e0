"""
Server-side sessions keyed by an opaque token carried in a signed cookie.

A ``SessionManager`` is built once per application in the lifespan handler and
kept on ``app.state``. Rows live in the ``sessions`` table; the cookie only
carries ``token.signature`` so a forged or truncated cookie never reaches the
database lookup.
"""

from datetime import datetime, timedelta, timezone

from fastapi import Request, Response
from itsdangerous import BadSignature, Signer
from sqlalchemy.orm import Session

from core.config import Settings
from core.logger import setup_logger
from core.security import new_session_token
from crud.session_crud import (
    create_session,
    delete_expired_sessions,
    delete_session_by_token,
    get_session_by_token,
)
from schemas.session_schema import SessionRecord

logger = setup_logger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionManager:
    def __init__(self, settings: Settings):
        self.cookie_name = settings.SESSION_COOKIE_NAME
        self.cookie_secure = settings.SESSION_COOKIE_SECURE
        self.ttl = timedelta(hours=settings.SESSION_TTL_HOURS)
        self._signer = Signer(settings.SESSION_SECRET, salt="session-cookie")

    def create_session(
        self,
        db: Session,
        user_id: int,
        username: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> str:
        token = new_session_token()
        create_session(
            db,
            user_id=user_id,
            username=username,
            token=token,
            expires_at=datetime.now(timezone.utc) + self.ttl,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return token

    def lookup_session(self, db: Session, token: str | None) -> SessionRecord | None:
        if not token:
            return None
        s = get_session_by_token(db, token)
        if s is None:
            return None
        expires_at = _as_utc(s.expires_at)
        if expires_at is None or expires_at <= datetime.now(timezone.utc):
            return None
        return SessionRecord(
            token=s.token,
            user_id=s.user_id,
            username=s.username,
            created_at=_as_utc(s.created_at),
            expires_at=expires_at,
        )

    def destroy_session(self, db: Session, token: str | None) -> None:
        if token:
            delete_session_by_token(db, token)

    def purge_expired(self, db: Session) -> int:
        removed = delete_expired_sessions(db, datetime.now(timezone.utc))
        if removed:
            logger.info(f"Purged {removed} expired sessions")
        return removed

    # Cookie transport

    def read_token(self, request: Request) -> str | None:
        raw = request.cookies.get(self.cookie_name)
        if not raw:
            return None
        try:
            return self._signer.unsign(raw).decode("utf-8")
        except BadSignature:
            return None

    def set_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            self.cookie_name,
            self._signer.sign(token).decode("utf-8"),
            max_age=int(self.ttl.total_seconds()),
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.cookie_secure,
        )

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(
            self.cookie_name,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.cookie_secure,
        )
