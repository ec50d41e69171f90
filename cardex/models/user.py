from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


def _utc_now() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    # "user" is reserved in PostgreSQL
    __tablename__ = "app_user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=_utc_now)
