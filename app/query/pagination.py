"""
Consistent pagination over a pipeline: the total is counted on the very query that is
windowed, so filters and required joins apply to both.
"""
import math
from typing import Any, Callable

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from app.query.pipeline import Pipeline, compile_query, count, materialize


class Page(BaseModel):
    items: list[Any]
    total_docs: int
    limit: int
    page: int
    total_pages: int
    paging_counter: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: int | None
    next_page: int | None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def paginate(
    db: Session,
    pipeline: Pipeline,
    page: int = 1,
    limit: int = 10,
    serialize: Callable[[dict], Any] | None = None,
) -> Page:
    compiled = compile_query(db, pipeline)
    total = count(db, compiled)
    rows = compiled.query.offset((page - 1) * limit).limit(limit).all()
    docs = materialize(db, compiled, rows)
    items = [serialize(d) for d in docs] if serialize else docs
    total_pages = math.ceil(total / limit) if total else 0
    has_prev = page > 1
    has_next = page < total_pages
    return Page(
        items=items,
        total_docs=total,
        limit=limit,
        page=page,
        total_pages=total_pages,
        paging_counter=(page - 1) * limit + 1,
        has_prev_page=has_prev,
        has_next_page=has_next,
        prev_page=page - 1 if has_prev else None,
        next_page=page + 1 if has_next else None,
    )
