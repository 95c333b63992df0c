"""Validated list options. Raw query strings are parsed here before any pipeline is built."""
from typing import Literal

from fastapi import Query
from pydantic import BaseModel

from app.config import get_settings
from app.core.errors import ValidationError
from app.utils.ids import parse_id


def parse_positive_int(value, default: int) -> int:
    """Lenient parse: non-numeric, absent or < 1 falls back to `default`."""
    if value is None:
        return default
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


class ListOptions(BaseModel):
    page: int = 1
    limit: int = 10
    query: str | None = None
    sort_by: str | None = None
    sort_type: Literal["asc", "desc"] | None = None
    user_id: str | None = None

    class Config:
        frozen = True

    @classmethod
    def parse(
        cls,
        page=None,
        limit=None,
        query: str | None = None,
        sort_by: str | None = None,
        sort_type: str | None = None,
        user_id: str | None = None,
    ) -> "ListOptions":
        settings = get_settings()
        sort_type = (sort_type or "").strip().lower() or None
        if sort_type not in (None, "asc", "desc"):
            raise ValidationError("sortType must be 'asc' or 'desc'")
        return cls(
            page=parse_positive_int(page, 1),
            limit=min(parse_positive_int(limit, settings.default_page_limit), settings.max_page_limit),
            query=(query or "").strip() or None,
            sort_by=(sort_by or "").strip() or None,
            sort_type=sort_type,
            user_id=parse_id(user_id, "user") if user_id else None,
        )


def list_options(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    query: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_type: str | None = Query(None, alias="sortType"),
    scope_user_id: str | None = Query(None, alias="userId"),
) -> ListOptions:
    """
    FastAPI dependency for list endpoints. Parameter names share a namespace with the
    route's path parameters, hence `scope_user_id` next to routes like `/user/{user_id}`.
    """
    return ListOptions.parse(page, limit, query, sort_by, sort_type, scope_user_id)
