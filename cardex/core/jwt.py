from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union
import jwt
from jwt.exceptions import PyJWTError
from cardex.core.config import settings


def create_access_token(subject: Union[str, Any], expires_delta: timedelta = None) -> str:
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject)}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_token(token: str) -> Optional[dict]:
    """Return the token claims, or None when the signature or expiry is invalid."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except PyJWTError:
        return None


def get_token_expiry(token: str) -> Optional[datetime]:
    payload = decode_token(token)
    if payload is None or "exp" not in payload:
        return None
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
