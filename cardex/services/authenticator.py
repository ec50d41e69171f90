"""
Credential verification and session issuance.

verify() answers a principal/password pair with either a signed, time-bounded
session token or InvalidCredentials. The failure is the same whether the
principal is unknown, the password is wrong, or the stored hash is unusable,
and an unknown principal still costs one hash verification.

register() stores a salted hash of the password; the plaintext is never
persisted or logged. Username uniqueness is enforced by the store.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from cardex.core import security
from cardex.core.config import settings
from cardex.core.errors import DuplicatePrincipal, IntegrityViolation, InvalidCredentials
from cardex.core.jwt import create_access_token, get_token_expiry
from cardex.db import QueryExecutor

logger = structlog.get_logger(__name__)

LOOKUP_SQL = "SELECT id, hashed_password FROM app_user WHERE username = :p0"
INSERT_SQL = "INSERT INTO app_user (username, hashed_password, created_at) VALUES (:p0, :p1, :p2)"
ID_SQL = "SELECT id FROM app_user WHERE username = :p0"
LIST_SQL = "SELECT id, username FROM app_user ORDER BY id"


@dataclass(frozen=True)
class SessionToken:
    access_token: str
    user_id: int
    expires_at: datetime
    token_type: str = "bearer"


class Authenticator:
    def __init__(self, executor: QueryExecutor, token_ttl: Optional[timedelta] = None):
        self.executor = executor
        self.token_ttl = token_ttl or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def verify(self, username: Optional[str], password: Optional[str]) -> SessionToken:
        """
        Check a password against the stored hash and mint a session token.

        Raises:
            InvalidCredentials: unknown principal, ambiguous lookup or wrong password
            StoreError: the credential store could not be queried
        """
        if not username or not password:
            # Missing values never match a stored principal, whatever the table holds
            security.dummy_verify()
            logger.info("Login rejected", reason="missing")
            raise InvalidCredentials()

        rows = self.executor.fetch_all(LOOKUP_SQL, [username])

        if len(rows) != 1:
            # Same cost as a real comparison so timing does not reveal the miss
            security.dummy_verify()
            logger.info("Login rejected", reason="lookup", matches=len(rows))
            raise InvalidCredentials()

        row = rows[0]
        if not security.verify_password(password, row["hashed_password"]):
            logger.info("Login rejected", reason="password", user_id=row["id"])
            raise InvalidCredentials()

        token = create_access_token(row["id"], expires_delta=self.token_ttl)
        expires_at = get_token_expiry(token)
        logger.info("Login succeeded", user_id=row["id"])
        return SessionToken(access_token=token, user_id=row["id"], expires_at=expires_at)

    def register(self, username: str, password: str) -> int:
        """
        Store a new principal and return its identifier.

        Raises:
            ValueError: username or password is empty
            DuplicatePrincipal: the store already holds this username
            StoreError: the write failed for any other reason
        """
        if not username or not password:
            raise ValueError("username and password are required")

        hashed_password = security.get_password_hash(password)
        try:
            self.executor.execute(INSERT_SQL, [username, hashed_password, datetime.now(timezone.utc)])
        except IntegrityViolation as e:
            logger.info("Registration rejected", reason="duplicate")
            raise DuplicatePrincipal(username) from e

        rows = self.executor.fetch_all(ID_SQL, [username])
        user_id = rows[0]["id"]
        logger.info("Principal registered", user_id=user_id)
        return user_id

    def list_principals(self) -> list[dict]:
        return self.executor.fetch_all(LIST_SQL)
