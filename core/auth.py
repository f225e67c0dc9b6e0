from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.database import get_db
from core.errors import AppError, ErrorKind
from core.sessions import SessionManager
from schemas.session_schema import SessionRecord


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_optional_session(
    request: Request,
    db: Session = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
) -> SessionRecord | None:
    """Resolve the session cookie; ``None`` when missing, forged or expired."""
    record = manager.lookup_session(db, manager.read_token(request))
    request.state.session = record
    return record


def require_session(
    record: SessionRecord | None = Depends(get_optional_session),
) -> SessionRecord:
    if record is None:
        raise AppError(ErrorKind.UNAUTHENTICATED, "Not authenticated")
    return record
