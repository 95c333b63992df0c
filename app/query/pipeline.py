"""
Feed query pipelines.

A Pipeline is a root table name plus an immutable, ordered tuple of stages. Builders in
app.query.feeds turn validated options into a Pipeline; compile_query() turns it into one
SQLAlchemy query, which is executed once (by execute/first here or by paginate).

Filter, sort, join and count stages compile into SQL. Reshape stages (Project, ReplaceRoot,
LookupMany, SizeOf) run on the fetched documents and never change how many rows there are,
so a count over the compiled query always matches what a window of it returns.
"""
from dataclasses import dataclass
from typing import Any

from sqlalchemy import UniqueConstraint, func, or_, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Query, Session, aliased

import app.models  # noqa: F401 - register mappers
from app.database import Base
from app.query.enrichment import Join, collapse, to_document


# ---------- Stages ----------


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match of `term`, OR-combined across `fields`."""
    fields: tuple[str, ...]
    term: str


@dataclass(frozen=True)
class Match:
    """Equality filter. `field` may name a column of an earlier join as "output.column"."""
    field: str
    value: Any


@dataclass(frozen=True)
class MatchAny:
    """OR of (field, value) equalities."""
    conditions: tuple[tuple[str, Any], ...]


@dataclass(frozen=True)
class Sort:
    field: str
    descending: bool = True


@dataclass(frozen=True)
class CountRelated:
    """
    Derived count of `source` rows whose `foreign_key` points at the root row.
    `where` adds equality filters on `source`; `resolve=(table, key)` only counts rows
    whose `key` still resolves to a row of `table`, and `resolve_any` further requires that
    row to match at least one of its (field, value) equalities.
    """
    output: str
    source: str
    foreign_key: str
    where: tuple[tuple[str, Any], ...] = ()
    resolve: tuple[str, str] | None = None
    resolve_any: tuple[tuple[str, Any], ...] = ()


@dataclass(frozen=True)
class Project:
    fields: tuple[str, ...]


@dataclass(frozen=True)
class ReplaceRoot:
    """Promote the output of a required join to be the document."""
    output: str


@dataclass(frozen=True)
class LookupMany:
    """Run `pipeline` per document, restricted to rows whose `foreign_key` equals doc[`local_key`]."""
    output: str
    pipeline: "Pipeline"
    foreign_key: str
    local_key: str = "id"


@dataclass(frozen=True)
class SizeOf:
    source: str
    output: str


RESHAPE_STAGES = (Project, ReplaceRoot, LookupMany, SizeOf)


@dataclass(frozen=True)
class Pipeline:
    root: str
    stages: tuple = ()

    def then(self, *stages) -> "Pipeline":
        return Pipeline(self.root, self.stages + tuple(stages))

    def prepend(self, *stages) -> "Pipeline":
        return Pipeline(self.root, tuple(stages) + self.stages)


# ---------- Compilation ----------


@dataclass(frozen=True)
class CompiledQuery:
    query: Query
    slots: tuple  # Join / CountRelated stages, in the order their values follow the root in a row
    reshapes: tuple


def _models() -> dict[str, type]:
    return {m.class_.__tablename__: m.class_ for m in Base.registry.mappers}


def _model(table: str) -> type:
    try:
        return _models()[table]
    except KeyError:
        raise ValueError(f"Unknown collection: {table}") from None


def _column(entity, name: str):
    column = getattr(entity, name, None)
    if column is None:
        raise ValueError(f"Unknown field: {name}")
    return column


def _field(entities: dict, name: str):
    """Column by name on the root, or on a joined output when written as "output.column"."""
    path, _, attr = name.rpartition(".")
    if path and path not in entities:
        raise ValueError(f"Unknown join output: {path}")
    return _column(entities[path or None], attr)


def _primary_key(entity):
    mapper = sa_inspect(entity).mapper
    return getattr(entity, mapper.primary_key[0].key)


def _is_unique_key(model: type, name: str) -> bool:
    column = model.__table__.columns.get(name)
    if column is None:
        return False
    if column.primary_key or column.unique:
        return True
    return any(
        isinstance(c, UniqueConstraint) and [col.name for col in c.columns] == [name]
        for c in model.__table__.constraints
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _count_subquery(root, stage: CountRelated):
    source = _model(stage.source)
    sub = select(func.count()).select_from(source)
    if stage.resolve:
        table, key = stage.resolve
        target = _model(table)
        sub = sub.join(target, _column(source, key) == _primary_key(target))
        if stage.resolve_any:
            sub = sub.where(or_(*[_column(target, f) == v for f, v in stage.resolve_any]))
    sub = sub.where(_column(source, stage.foreign_key) == _primary_key(root))
    for field, value in stage.where:
        sub = sub.where(_column(source, field) == value)
    return sub.correlate(root).scalar_subquery()


def compile_query(db: Session, pipeline: Pipeline) -> CompiledQuery:
    root = _model(pipeline.root)
    entities = {None: root}
    required = set()
    query = db.query(root)
    order_by = []
    slots = []
    reshapes = []

    for stage in pipeline.stages:
        if isinstance(stage, TextSearch):
            term = (stage.term or "").strip()
            if term:
                pattern = f"%{_escape_like(term)}%"
                query = query.filter(
                    or_(*[_column(root, f).ilike(pattern, escape="\\") for f in stage.fields])
                )
        elif isinstance(stage, Match):
            query = query.filter(_field(entities, stage.field) == stage.value)
        elif isinstance(stage, MatchAny):
            query = query.filter(or_(*[_field(entities, f) == v for f, v in stage.conditions]))
        elif isinstance(stage, Sort):
            column = _field(entities, stage.field)
            order_by.append(column.desc() if stage.descending else column.asc())
        elif isinstance(stage, Join):
            if stage.within not in entities:
                raise ValueError(f"Join '{stage.output}' is nested in unknown output '{stage.within}'")
            model = _model(stage.source)
            if not _is_unique_key(model, stage.foreign_key):
                raise ValueError(f"Join '{stage.output}' must target a unique key of {stage.source}")
            target = aliased(model, name=stage.path.replace(".", "__"))
            onclause = _column(entities[stage.within], stage.local_key) == _column(target, stage.foreign_key)
            if stage.required:
                query = query.join(target, onclause)
                required.add(stage.path)
            else:
                query = query.outerjoin(target, onclause)
            query = query.add_entity(target)
            entities[stage.path] = target
            slots.append(stage)
        elif isinstance(stage, CountRelated):
            query = query.add_columns(_count_subquery(root, stage).label(stage.output))
            slots.append(stage)
        elif isinstance(stage, RESHAPE_STAGES):
            if isinstance(stage, ReplaceRoot) and stage.output not in required:
                raise ValueError(f"ReplaceRoot needs a required join named '{stage.output}'")
            reshapes.append(stage)
        else:
            raise TypeError(f"Unsupported pipeline stage: {stage!r}")

    # Primary key tiebreaker keeps page windows stable under equal sort keys
    order_by.append(_primary_key(root).asc())
    query = query.order_by(*order_by)
    return CompiledQuery(query=query, slots=tuple(slots), reshapes=tuple(reshapes))


# ---------- Execution ----------


def _place(doc: dict, within: str | None, key: str, value) -> None:
    target = doc
    if within:
        for part in within.split("."):
            target = target.get(part) if isinstance(target, dict) else None
            if target is None:
                return
    target[key] = value


def _to_doc(row, compiled: CompiledQuery) -> dict:
    values = tuple(row) if compiled.slots else (row,)
    doc = to_document(values[0])
    for stage, value in zip(compiled.slots, values[1:]):
        if isinstance(stage, Join):
            _place(doc, stage.within, stage.output, collapse(value, stage.fields))
        else:
            doc[stage.output] = int(value or 0)
    return doc


def _reshape(db: Session, docs: list[dict], reshapes: tuple) -> list[dict]:
    for stage in reshapes:
        if isinstance(stage, Project):
            docs = [{k: d.get(k) for k in stage.fields} for d in docs]
        elif isinstance(stage, ReplaceRoot):
            docs = [d[stage.output] for d in docs]
        elif isinstance(stage, LookupMany):
            for d in docs:
                sub = stage.pipeline.prepend(Match(stage.foreign_key, d[stage.local_key]))
                d[stage.output] = execute(db, sub)
        elif isinstance(stage, SizeOf):
            for d in docs:
                d[stage.output] = len(d.get(stage.source) or [])
    return docs


def materialize(db: Session, compiled: CompiledQuery, rows) -> list[dict]:
    return _reshape(db, [_to_doc(r, compiled) for r in rows], compiled.reshapes)


def execute(db: Session, pipeline: Pipeline) -> list[dict]:
    compiled = compile_query(db, pipeline)
    return materialize(db, compiled, compiled.query.all())


def first(db: Session, pipeline: Pipeline) -> dict | None:
    compiled = compile_query(db, pipeline)
    docs = materialize(db, compiled, compiled.query.limit(1).all())
    return docs[0] if docs else None


def count(db: Session, compiled: CompiledQuery) -> int:
    """Row count of the compiled query: same filters and joins, ordering dropped."""
    return compiled.query.order_by(None).count()
