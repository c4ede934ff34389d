"""
Application-level joins.

Given primary rows that reference other tables by id, fetch each referenced
table once with an ``IN`` filter over the distinct ids and attach the match
(or a placeholder) to every row under a display field.

Prefer a database join where both sides live in the same database. This is
for lists assembled from independently fetched row sets.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from medilink.core.errors import FetchError
from medilink.core.logger import logger

log = logger.getChild("reconcile")


@dataclass(frozen=True, eq=False)
class ForeignJoin:
    """
    One foreign-key column to resolve.

    ``column`` is read from each primary row, ``model`` is the referenced
    table, ``columns`` are copied from the match into ``attach_as``, and
    ``placeholder`` is attached when there is no match. With ``optional``
    a null foreign key attaches None instead of the placeholder.
    """

    column: str
    model: type[SQLModel]
    attach_as: str
    columns: Sequence[str]
    placeholder: dict = field(default_factory=dict)
    key: str = "id"
    optional: bool = False


def _value(row: Any, name: str) -> Any:
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def _as_dict(row: Any) -> dict:
    if isinstance(row, dict):
        return dict(row)
    return row.model_dump()


def collect_ids(rows: Iterable[Any], column: str) -> list:
    """Distinct non-null values of ``column``, in first-seen order."""
    seen = {}
    for row in rows:
        value = _value(row, column)
        if value is not None and value not in seen:
            seen[value] = None
    return list(seen)


async def fetch_by_ids(
    session: AsyncSession,
    model: type[SQLModel],
    key: str,
    columns: Sequence[str],
    ids: Sequence,
) -> dict:
    """One batched lookup; returns key -> {column: value}."""
    if not ids:
        return {}
    key_col = getattr(model, key)
    wanted = [key] + [c for c in columns if c != key]
    stmt = select(*[getattr(model, c) for c in wanted]).where(key_col.in_(ids))
    try:
        result = await session.execute(stmt)
    except SQLAlchemyError as exc:
        log.error(f"Error fetching {model.__tablename__} by id: {exc}")
        raise FetchError(f"Failed to load {model.__tablename__}") from exc
    return {row[0]: dict(zip(wanted, row)) for row in result.all()}


async def reconcile(
    session: AsyncSession,
    rows: Sequence[Any],
    joins: Sequence[ForeignJoin],
) -> list[dict]:
    """
    Return each primary row as a dict with every join's display field set.

    Secondary queries are issued per distinct related table, never per row,
    and not at all when ``rows`` is empty. Joins that share a model share a
    single lookup.
    """
    if not rows:
        return []

    by_model: dict[type[SQLModel], list[ForeignJoin]] = {}
    for join in joins:
        by_model.setdefault(join.model, []).append(join)

    lookups: dict[ForeignJoin, dict] = {}
    for model, model_joins in by_model.items():
        keys = {j.key for j in model_joins}
        if len(keys) != 1:
            raise ValueError(f"Joins on {model.__tablename__} must share a key column")
        ids: list = []
        for join in model_joins:
            for value in collect_ids(rows, join.column):
                if value not in ids:
                    ids.append(value)
        columns: list[str] = []
        for join in model_joins:
            columns.extend(c for c in join.columns if c not in columns)
        found = await fetch_by_ids(session, model, model_joins[0].key, columns, ids)
        for join in model_joins:
            lookups[join] = found

    merged = []
    for row in rows:
        item = _as_dict(row)
        for join in joins:
            value = _value(row, join.column)
            if value is None and join.optional:
                item[join.attach_as] = None
                continue
            match = lookups[join].get(value)
            if match is None:
                item[join.attach_as] = dict(join.placeholder)
            else:
                attached = {c: match.get(c) for c in join.columns}
                for name, default in join.placeholder.items():
                    if not attached.get(name):
                        attached[name] = default
                item[join.attach_as] = attached
        merged.append(item)

    missing = sum(
        1 for join in joins for row in rows
        if _value(row, join.column) is not None and _value(row, join.column) not in lookups[join]
    )
    if missing:
        log.info(f"Attached placeholders for {missing} unresolved reference(s)")
    return merged
