from typing import Any, List
from fastapi import APIRouter, Depends, status

from cardex.api import deps
from cardex.schemas import MessageResponse, UserCreate, UserOut
from cardex.services.authenticator import Authenticator

router = APIRouter()


@router.get("", response_model=List[UserOut])
def read_users(authenticator: Authenticator = Depends(deps.get_authenticator)) -> Any:
    return authenticator.list_principals()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_in: UserCreate,
    authenticator: Authenticator = Depends(deps.get_authenticator),
) -> Any:
    """
    Register a new user. 409 when the username is taken.
    """
    authenticator.register(user_in.username, user_in.password)
    return MessageResponse(message="User created")
