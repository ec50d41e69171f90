from typing import Any
from fastapi import APIRouter, Depends

from cardex.api import deps
from cardex.schemas import Credentials, LoginResponse
from cardex.services.authenticator import Authenticator

router = APIRouter()


@router.post("/connexion", response_model=LoginResponse)
def login(
    credentials: Credentials,
    authenticator: Authenticator = Depends(deps.get_authenticator),
) -> Any:
    """
    Exchange a username and password for a session token.

    Unknown users and wrong passwords both answer 401 with the same body.
    """
    session_token = authenticator.verify(credentials.username, credentials.password)
    return LoginResponse(
        success=True,
        message="Login successful",
        token=session_token.access_token,
        token_type=session_token.token_type,
    )
