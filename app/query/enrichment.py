"""
Ownership enrichment: one join descriptor used for every foreign reference that is shown
to clients. A join resolves to exactly None or one projected object, never a list.
"""
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect as sa_inspect

# Public projection of a user when shown as the owner of something
OWNER_FIELDS = ("username", "full_name", "avatar")
# Same, plus id, for lists of users (subscribers, subscribed channels)
PUBLIC_USER_FIELDS = ("id", "username", "full_name", "avatar")


@dataclass(frozen=True)
class Join:
    """
    Many-to-one join from `local_key` (on the root, or on the output named by `within`)
    to `foreign_key` on `source`. `foreign_key` must be the primary key or a unique column
    so at most one row can match. `fields=None` keeps every column of the joined row.
    `required=True` makes it an inner join: rows whose reference does not resolve are dropped
    before counting and windowing.
    """
    source: str
    local_key: str
    foreign_key: str
    output: str
    fields: tuple[str, ...] | None = None
    within: str | None = None
    required: bool = False

    @property
    def path(self) -> str:
        return f"{self.within}.{self.output}" if self.within else self.output


def owner_join(
    within: str | None = None,
    local_key: str = "owner_id",
    output: str = "owner",
    fields: tuple[str, ...] = OWNER_FIELDS,
) -> Join:
    return Join(
        source="users",
        local_key=local_key,
        foreign_key="id",
        output=output,
        fields=fields,
        within=within,
    )


OWNER_JOIN = owner_join()


def to_document(instance: Any) -> dict:
    """Column values of a mapped instance as a plain dict keyed by attribute name."""
    mapper = sa_inspect(instance).mapper
    return {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}


def collapse(instance: Any, fields: tuple[str, ...] | None) -> dict | None:
    if instance is None:
        return None
    if fields is None:
        return to_document(instance)
    return {name: getattr(instance, name) for name in fields}
