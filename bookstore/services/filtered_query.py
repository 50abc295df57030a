from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import and_, asc, desc, not_, or_
from sqlalchemy.orm import Query, Session

from bookstore.core.errors import InvalidArgument
from bookstore.schemas.query import FilterCriterion
from bookstore.services.entity_fields import (
    INT64_MAX,
    KIND_DATETIME,
    KIND_STRING,
    EntityDefinition,
    EntityField,
    is_date_only_literal,
)

logger = logging.getLogger(__name__)

_FILTERS_ADAPTER = TypeAdapter(List[FilterCriterion])

_TEXT_OPERATORS = {"Contains", "StartsWith", "EndsWith"}
_ORDERING_OPERATORS = {"GreaterThan", "GreaterThanOrEqual", "LessThan", "LessThanOrEqual"}


def _not_equal(field: EntityField, expr):
    # Rows holding NULL are "not equal" to any concrete value.
    if field.nullable:
        return or_(not_(expr), field.column.is_(None))
    return not_(expr)


def build_filter_predicate(definition: EntityDefinition, criterion: FilterCriterion):
    field = definition.require(criterion.property_name)
    col = field.column
    op = criterion.operator

    if op in _TEXT_OPERATORS and field.kind != KIND_STRING:
        raise InvalidArgument(f'Operator "{op}" applies to text fields only, "{field.name}" is {field.kind}')
    if op in _ORDERING_OPERATORS and not field.ordered:
        raise InvalidArgument(f'Operator "{op}" is not supported for field "{field.name}" ({field.kind})')

    if criterion.value is None:
        if op == "Equal":
            return col.is_(None)
        if op == "NotEqual":
            return col.is_not(None)
        raise InvalidArgument(f'Operator "{op}" requires a value for field "{field.name}"')

    value = field.coerce(criterion.value)
    if field.kind == KIND_DATETIME and op in {"Equal", "NotEqual"} and is_date_only_literal(criterion.value):
        day_expr = and_(col >= value, col < value + timedelta(days=1))
        return day_expr if op == "Equal" else _not_equal(field, day_expr)

    if op == "Equal":
        return col == value
    if op == "NotEqual":
        return _not_equal(field, col == value)
    if op == "Contains":
        return col.contains(value, autoescape=True)
    if op == "StartsWith":
        return col.startswith(value, autoescape=True)
    if op == "EndsWith":
        return col.endswith(value, autoescape=True)
    if op == "GreaterThan":
        return col > value
    if op == "GreaterThanOrEqual":
        return col >= value
    if op == "LessThan":
        return col < value
    return col <= value


def build_search_predicate(definition: EntityDefinition, search_term: str | None):
    term = str(search_term or "").strip()
    if not term or not definition.searchable_fields:
        return None
    return or_(*[field.column.icontains(term, autoescape=True) for field in definition.searchable_fields])


def build_where_clauses(
    definition: EntityDefinition,
    filters: Sequence[FilterCriterion] | None,
    search_term: str | None,
) -> list:
    clauses = [build_filter_predicate(definition, criterion) for criterion in filters or []]
    search = build_search_predicate(definition, search_term)
    if search is not None:
        clauses.append(search)
    return clauses


def validate_page(page_number: int, page_size: int) -> None:
    if not 1 <= page_size <= INT64_MAX:
        raise InvalidArgument("Page size invalid")
    if page_number < 1:
        raise InvalidArgument("Page number invalid")


def resolve_sort(definition: EntityDefinition, sort_field: str | None, sort_order: str | None):
    """Return ``(field, descending)`` for the requested sort, or ``None`` when unsorted."""
    if not sort_field:
        return None
    field = definition.require(sort_field)
    order = str(sort_order or "asc").strip().lower()
    if order not in {"asc", "desc"}:
        raise InvalidArgument("Invalid sort order. Use 'asc' or 'desc'")
    return field, order == "desc"


def _base_query(db: Session, definition: EntityDefinition, clauses: list) -> Query:
    q = db.query(definition.model)
    if clauses:
        q = q.filter(*clauses)
    return q


def list_entities(
    db: Session,
    definition: EntityDefinition,
    *,
    filters: Sequence[FilterCriterion] | None = None,
    search_term: str | None = "",
    page_number: int = 1,
    page_size: int = 1,
    sort_field: str | None = None,
    sort_order: str | None = "asc",
) -> list:
    validate_page(page_number, page_size)
    sort = resolve_sort(definition, sort_field, sort_order)
    clauses = build_where_clauses(definition, filters, search_term)

    skip = (page_number - 1) * page_size
    if skip > INT64_MAX:
        # Beyond any row count and beyond what the driver can bind.
        return []

    q = _base_query(db, definition, clauses).options(*definition.load_options())
    identity = definition.identity.column
    if sort is not None:
        field, descending = sort
        q = q.order_by(desc(field.column) if descending else asc(field.column))
    # Identity as the last key keeps pages stable across calls.
    q = q.order_by(asc(identity))

    logger.debug(
        "list %s filters=%s search=%r sort=%s page=%s size=%s",
        definition.label,
        len(filters or []),
        search_term or "",
        sort_field or "-",
        page_number,
        page_size,
    )
    return q.offset(skip).limit(page_size).all()


def count_entities(
    db: Session,
    definition: EntityDefinition,
    *,
    filters: Sequence[FilterCriterion] | None = None,
    search_term: str | None = "",
) -> int:
    clauses = build_where_clauses(definition, filters, search_term)
    return _base_query(db, definition, clauses).count()


def parse_filters(raw: str | None) -> list[FilterCriterion]:
    """Parse the ``[{"PropertyName", "Operator", "Value"}]`` JSON array of the list endpoints."""
    text = str(raw or "").strip()
    if not text:
        return []
    try:
        return _FILTERS_ADAPTER.validate_json(text)
    except ValidationError as exc:
        errors = exc.errors()
        reason = errors[0].get("msg") if errors else str(exc)
        raise InvalidArgument(f"Invalid filters: {reason}") from exc
