"""
Storage access.

The engine owns the connection pool. Everything above this module talks to
the store through a QueryExecutor, which runs one parameterized statement per
call on a pooled connection and always hands the connection back.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence
import logging

from sqlmodel import create_engine, SQLModel
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cardex.core.config import settings
from cardex.core.errors import IntegrityViolation, StoreError

logger = logging.getLogger(__name__)


def placeholder(position: int) -> str:
    """Named bind used for the parameter at ``position`` of a positional list."""
    return f":p{position}"


def bind_positional(params: Sequence[Any]) -> dict[str, Any]:
    """Turn an ordered parameter list into the mapping ``text()`` binds by name."""
    return {f"p{i}": value for i, value in enumerate(params)}


def build_engine(url: str = None, **kwargs: Any) -> Engine:
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        # SQLite has no server-side pool to size
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        return create_engine(url, echo=False, **kwargs)

    return create_engine(
        url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=300,
        **kwargs,
    )


engine = build_engine()


class QueryExecutor:
    """
    Runs parameterized statements against a pooled engine.

    Parameters are given as an ordered list whose items bind, in order, to the
    ``:p0``, ``:p1``... placeholders of the statement. Any driver or pool
    failure surfaces as StoreError; nothing is retried.
    """

    def __init__(self, bound_engine: Engine):
        self.engine = bound_engine

    @contextmanager
    def connection(self, write: bool = False) -> Iterator[Connection]:
        """Borrow one pooled connection; writes run in a transaction."""
        opener = self.engine.begin if write else self.engine.connect
        try:
            with opener() as conn:
                yield conn
        except IntegrityError as e:
            logger.warning("Store rejected write: %s", e.orig)
            raise IntegrityViolation(str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.error("Store failure: %s", e)
            raise StoreError("Store unavailable") from e

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[Mapping[str, Any]]:
        """Execute a read and return every row as a column mapping."""
        with self.connection() as conn:
            result = conn.execute(text(sql), bind_positional(params))
            return [dict(row) for row in result.mappings()]

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute a write and return the number of affected rows."""
        with self.connection(write=True) as conn:
            result = conn.execute(text(sql), bind_positional(params))
            return result.rowcount


def get_executor() -> QueryExecutor:
    """FastAPI dependency; overridden in tests with an in-memory store."""
    return QueryExecutor(engine)


def create_db_and_tables(bound_engine: Engine = None):
    import cardex.models  # noqa: F401  (registers table metadata)

    SQLModel.metadata.create_all(bound_engine or engine)
