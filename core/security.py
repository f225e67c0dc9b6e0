import secrets

import bcrypt

# bcrypt only looks at the first 72 bytes; newer releases reject anything longer
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Hash a plain text password using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed_password = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed_password.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a bcrypt digest."""
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Malformed digest stored for the user
        return False


def new_session_token() -> str:
    return secrets.token_urlsafe(32)
