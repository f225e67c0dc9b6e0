from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from core.auth import get_optional_session, get_session_manager
from core.config import Settings, get_app_settings
from core.database import get_db
from core.logger import setup_logger
from core.sessions import SessionManager
from crud.user_crud import authenticate_user, create_user, require_credentials
from schemas.common_schema import OkResponse
from schemas.session_schema import SessionRecord
from schemas.user_schema import Credentials, UserIdentity

logger = setup_logger(__name__)

router = APIRouter(tags=["Authentication"])


def _start_session(
    request: Request,
    response: Response,
    db: Session,
    manager: SessionManager,
    user_id: int,
    username: str,
) -> None:
    # Any session presented with the request is replaced, not reused
    manager.destroy_session(db, manager.read_token(request))
    token = manager.create_session(
        db,
        user_id=user_id,
        username=username,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    manager.set_cookie(response, token)


@router.post("/signup", response_model=UserIdentity)
def signup(
    payload: Credentials,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create an account and sign the caller in.
    """
    username, password = require_credentials(payload.username, payload.password)
    user = create_user(db, username, password, rounds=settings.BCRYPT_ROUNDS)
    _start_session(request, response, db, manager, user.id, user.username)
    logger.info(f"User signed up: {user.username} (id={user.id})")
    return UserIdentity(id=user.id, username=user.username)


@router.post("/login", response_model=UserIdentity)
def login(
    payload: Credentials,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
):
    """
    Verify username and password and issue a session cookie.
    """
    username, password = require_credentials(payload.username, payload.password)
    user = authenticate_user(db, username, password, rounds=settings.BCRYPT_ROUNDS)
    _start_session(request, response, db, manager, user.id, user.username)
    logger.info(f"User logged in: {user.username} (id={user.id})")
    return UserIdentity(id=user.id, username=user.username)


@router.post("/logout", response_model=OkResponse)
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
):
    manager.destroy_session(db, manager.read_token(request))
    manager.clear_cookie(response)
    return OkResponse()


@router.get("/me", response_model=UserIdentity | None)
def me(record: SessionRecord | None = Depends(get_optional_session)):
    if record is None:
        return None
    return UserIdentity(id=record.user_id, username=record.username)
