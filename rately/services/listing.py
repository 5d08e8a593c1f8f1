"""Search, sort and offset pagination shared by every list endpoint."""

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

DEFAULT_SORT_FIELD = "name"
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class PageRequest:
    """Validated page/limit pair; page is 1-based."""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageResult:
    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def contains(column: Any, term: str) -> ColumnElement:
    """Case-insensitive substring match with LIKE wildcards escaped."""
    return column.ilike(_like_pattern(term), escape="\\")


def apply_text_filters(
    query: Query,
    *,
    search: str | None,
    search_columns: list[Any],
    field_filters: dict[Any, str | None],
) -> Query:
    """
    Free-text search across search_columns, or per-field filters.

    When search is given the per-field filters are ignored.
    """
    if search and search.strip():
        term = search.strip()
        return query.filter(or_(*(contains(col, term) for col in search_columns)))
    for column, value in field_filters.items():
        if value and value.strip():
            query = query.filter(contains(column, value.strip()))
    return query


def resolve_sort(
    sort_by: str | None,
    sort_order: str | None,
    allowed: dict[str, Any],
    default_field: str = DEFAULT_SORT_FIELD,
) -> ColumnElement:
    """
    Map request sort parameters to an ORDER BY clause.

    Unknown fields fall back to default_field; unknown orders fall back to ascending.
    """
    column = allowed.get(sort_by or "", allowed[default_field])
    order = (sort_order or "asc").lower()
    if order not in SORT_ORDERS:
        order = "asc"
    return column.desc() if order == "desc" else column.asc()


def paginate(query: Query, page: PageRequest) -> PageResult:
    """Count the full query, then fetch one page of it."""
    total = query.order_by(None).count()
    items = query.offset(page.offset).limit(page.limit).all()
    return PageResult(items=items, total=total, page=page.page, limit=page.limit)
