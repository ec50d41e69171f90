"""
Catalog query builder.

Translates the optional catalog filters, the sort request and the page
request into a single bounded, parameterized statement. Pure: no I/O, no
failure modes. Malformed numeric input is coerced to defaults, never
rejected, so the listing endpoint always returns a bounded result set.

Example:
    >>> q = build_catalog_query(
    ...     CardFilters(name="Dragon", type="Spell Card"),
    ...     SortMode.NONE,
    ...     PageRequest.parse(page="2", limit="10"),
    ... )
    >>> q.sql
    'SELECT * FROM card WHERE LOWER(name) LIKE LOWER(:p0) AND type = :p1 LIMIT :p2 OFFSET :p3'
    >>> q.params
    ['%Dragon%', 'Spell Card', 10, 10]
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from cardex.core.config import settings
from cardex.db import bind_positional, placeholder
from cardex.models.card import MONSTER_CARD, NON_MONSTER_TYPES

__all__ = [
    "CardFilters",
    "SortMode",
    "PageRequest",
    "CatalogQuery",
    "build_catalog_query",
    "coerce_positive_int",
]

BASE_QUERY = "SELECT * FROM card"

# Leading integer, like a lenient parseInt: "3", " 3", "3abc", "-5", "2.9"
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_positive_int(value: Any, default: int) -> int:
    """
    Parse ``value`` as a positive integer, falling back to ``default``.

    Absent, non-numeric, zero and negative values all yield the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    number = int(match.group(1))
    return number if number > 0 else default


class SortMode(str, Enum):
    NONE = "none"
    ALPHABETICAL = "alphabetical"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"

    @classmethod
    def from_request(cls, sort_alphabetical: Optional[str] = None, sort_price: Optional[str] = None) -> "SortMode":
        """
        Resolve the two sort query parameters into one mode.

        Alphabetical ordering wins over price ordering; the two never combine.
        Any non-empty price value other than DESC sorts ascending.
        """
        if sort_alphabetical and sort_alphabetical.strip().upper() == "ASC":
            return cls.ALPHABETICAL
        if sort_price:
            if sort_price.strip().upper() == "DESC":
                return cls.PRICE_DESC
            return cls.PRICE_ASC
        return cls.NONE


ORDER_BY = {
    SortMode.ALPHABETICAL: "ORDER BY name ASC",
    SortMode.PRICE_ASC: "ORDER BY set_price ASC",
    SortMode.PRICE_DESC: "ORDER BY set_price DESC",
}


@dataclass(frozen=True)
class CardFilters:
    """Optional catalog constraints. None or empty means unconstrained."""

    name: Optional[str] = None
    type: Optional[str] = None
    rarity: Optional[str] = None


@dataclass(frozen=True)
class PageRequest:
    number: int = 1
    size: int = field(default_factory=lambda: settings.CATALOG_PAGE_SIZE)

    @classmethod
    def parse(cls, page: Any = None, limit: Any = None) -> "PageRequest":
        """Build a page request from raw query-string values."""
        size = coerce_positive_int(limit, settings.CATALOG_PAGE_SIZE)
        return cls(
            number=coerce_positive_int(page, 1),
            size=min(size, settings.CATALOG_MAX_PAGE_SIZE),
        )

    @property
    def offset(self) -> int:
        return (self.number - 1) * self.size


@dataclass(frozen=True)
class CatalogQuery:
    """A statement whose ``:pN`` placeholders bind, in order, to ``params``."""

    sql: str
    params: list

    def bind_params(self) -> dict[str, Any]:
        return bind_positional(self.params)


def build_catalog_query(
    filters: CardFilters,
    sort_mode: SortMode = SortMode.NONE,
    page: PageRequest = None,
) -> CatalogQuery:
    page = page or PageRequest()
    params: list = []
    where: list[str] = []

    def bind(value: Any) -> str:
        params.append(value)
        return placeholder(len(params) - 1)

    if filters.name:
        where.append(f"LOWER(name) LIKE LOWER({bind(f'%{filters.name}%')})")

    if filters.type:
        if filters.type == MONSTER_CARD:
            excluded = ", ".join(f"'{t}'" for t in NON_MONSTER_TYPES)
            where.append(f"type NOT IN ({excluded})")
        else:
            where.append(f"type = {bind(filters.type)}")

    if filters.rarity:
        where.append(f"set_rarity = {bind(filters.rarity)}")

    parts = [BASE_QUERY]
    if where:
        parts.append("WHERE " + " AND ".join(where))

    order_by = ORDER_BY.get(sort_mode)
    if order_by:
        parts.append(order_by)

    parts.append(f"LIMIT {bind(page.size)} OFFSET {bind(page.offset)}")

    return CatalogQuery(sql=" ".join(parts), params=params)
