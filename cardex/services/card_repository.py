from typing import Any, Mapping

import structlog

from cardex.core.errors import NotFound
from cardex.db import QueryExecutor, placeholder
from cardex.models.card import EDITABLE_COLUMNS
from cardex.services.catalog_query import CardFilters, PageRequest, SortMode, build_catalog_query

logger = structlog.get_logger(__name__)


class CardRepository:
    """Catalog reads and the single-record maintenance operations."""

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    def search(self, filters: CardFilters, sort_mode: SortMode, page: PageRequest) -> list[Mapping[str, Any]]:
        query = build_catalog_query(filters, sort_mode, page)
        return self.executor.fetch_all(query.sql, query.params)

    def get(self, card_id: int) -> Mapping[str, Any]:
        rows = self.executor.fetch_all("SELECT * FROM card WHERE id = :p0", [card_id])
        if not rows:
            raise NotFound("Card", card_id)
        return rows[0]

    def update(self, card_id: int, fields: Mapping[str, Any]) -> None:
        """Overwrite the given columns; unknown column names are ignored."""
        columns = [name for name in EDITABLE_COLUMNS if name in fields]
        if not columns:
            # Nothing to write, but the record still has to exist
            self.get(card_id)
            return

        assignments = ", ".join(f"{name} = {placeholder(i)}" for i, name in enumerate(columns))
        params = [fields[name] for name in columns] + [card_id]
        sql = f"UPDATE card SET {assignments} WHERE id = {placeholder(len(columns))}"

        if self.executor.execute(sql, params) == 0:
            raise NotFound("Card", card_id)
        logger.info("Card updated", card_id=card_id, columns=columns)

    def delete(self, card_id: int) -> None:
        if self.executor.execute("DELETE FROM card WHERE id = :p0", [card_id]) == 0:
            raise NotFound("Card", card_id)
        logger.info("Card deleted", card_id=card_id)
