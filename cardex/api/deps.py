from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from cardex.core.context import set_user_id
from cardex.core.jwt import decode_token
from cardex.db import QueryExecutor, get_executor
from cardex.services.authenticator import Authenticator
from cardex.services.card_repository import CardRepository

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/connexion", auto_error=False)


def get_authenticator(executor: QueryExecutor = Depends(get_executor)) -> Authenticator:
    return Authenticator(executor)


def get_card_repository(executor: QueryExecutor = Depends(get_executor)) -> CardRepository:
    return CardRepository(executor)


def get_current_user_id(token: Optional[str] = Depends(oauth2_scheme)) -> int:
    """
    Identifier of the principal a bearer token was issued to.

    The token must carry a valid signature and must not be expired.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise credentials_exception

    set_user_id(user_id)
    return user_id
