from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable

from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import selectinload

from bookstore.core.errors import InvalidArgument

KIND_STRING = "string"
KIND_INTEGER = "integer"
KIND_FLOAT = "float"
KIND_DECIMAL = "decimal"
KIND_BOOLEAN = "boolean"
KIND_DATE = "date"
KIND_DATETIME = "datetime"
KIND_UUID = "uuid"

ORDERED_KINDS = frozenset({KIND_INTEGER, KIND_FLOAT, KIND_DECIMAL, KIND_DATE, KIND_DATETIME})

# Widest integer every supported driver binds (BIGINT).
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_TRUE_WORDS = frozenset({"1", "true", "yes", "y"})
_FALSE_WORDS = frozenset({"0", "false", "no", "n"})

_KIND_BY_PYTHON_TYPE = {
    str: KIND_STRING,
    int: KIND_INTEGER,
    float: KIND_FLOAT,
    Decimal: KIND_DECIMAL,
    bool: KIND_BOOLEAN,
    date: KIND_DATE,
    datetime: KIND_DATETIME,
    uuid.UUID: KIND_UUID,
}


def normalize_field_name(name: str | None) -> str:
    # "PublishedOn", "publishedOn" and "published_on" address the same field.
    return str(name or "").strip().replace("_", "").lower()


def is_date_only_literal(value) -> bool:
    """True for a ``date`` or a ``YYYY-MM-DD`` string without a time part."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return True
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text or "T" in text or " " in text:
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def _text_of(value) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValueError("empty value")
    return text


def _parse_uuid(value) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(_text_of(value))


def _parse_boolean(value) -> bool:
    if isinstance(value, bool):
        return value
    word = _text_of(value).lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {word!r}")


def _decimal_text(value) -> str:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    # Clients in comma-decimal locales send "9,99".
    return _text_of(value).replace(",", ".")


def _parse_integer(value) -> int:
    number = value if isinstance(value, int) and not isinstance(value, bool) else int(_decimal_text(value))
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError("integer out of range")
    return number


def _parse_float(value) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return float(_decimal_text(value))


def _parse_decimal(value) -> Decimal:
    return Decimal(_decimal_text(value))


def _parse_date(value) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    text = _text_of(value)
    if "T" in text or " " in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        moment = value
    elif is_date_only_literal(value):
        moment = datetime.combine(_parse_date(value), time.min)
    else:
        moment = datetime.fromisoformat(_text_of(value).replace("Z", "+00:00"))
    # Stored timestamps are UTC; naive input is read as UTC too.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


_PARSERS: dict[str, Callable[[Any], Any]] = {
    KIND_STRING: str,
    KIND_INTEGER: _parse_integer,
    KIND_FLOAT: _parse_float,
    KIND_DECIMAL: _parse_decimal,
    KIND_BOOLEAN: _parse_boolean,
    KIND_DATE: _parse_date,
    KIND_DATETIME: _parse_datetime,
    KIND_UUID: _parse_uuid,
}


@dataclass(frozen=True)
class EntityField:
    name: str
    kind: str
    column: Any
    nullable: bool
    searchable: bool = False

    @property
    def ordered(self) -> bool:
        return self.kind in ORDERED_KINDS

    def coerce(self, value):
        """Convert a client-supplied filter value to this field's native type."""
        try:
            return _PARSERS[self.kind](value)
        except (ValueError, TypeError, InvalidOperation) as exc:
            raise InvalidArgument(f'Invalid filter value for field "{self.name}" ({self.kind})') from exc


def _column_kind(column) -> str | None:
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return None
    return _KIND_BY_PYTHON_TYPE.get(python_type)


class EntityDefinition:
    """Static field-name -> typed column mapping for one ORM entity.

    Built once when the entity is registered; every problem with the
    registration itself (unknown searchable field, unsupported column type,
    unknown relation) is a ``ValueError`` raised at that point.  Per-call
    lookups of client-supplied names go through :meth:`require`, which
    raises ``InvalidArgument``.
    """

    def __init__(
        self,
        model: type,
        *,
        label: str,
        searchable: Iterable[str] = (),
        relations: Iterable[str] = (),
    ):
        mapper = sa_inspect(model)
        self.model = model
        self.label = label

        primary_key = list(mapper.primary_key)
        if len(primary_key) != 1:
            raise ValueError(f"{model.__name__}: exactly one primary key column is required")

        searchable_names = set(searchable)
        fields: dict[str, EntityField] = {}
        for attr in mapper.column_attrs:
            column = attr.columns[0]
            kind = _column_kind(column)
            if kind is None:
                raise ValueError(f"{model.__name__}.{attr.key}: unsupported column type {column.type!r}")
            fields[attr.key] = EntityField(
                name=attr.key,
                kind=kind,
                column=getattr(model, attr.key),
                nullable=bool(column.nullable),
                searchable=attr.key in searchable_names,
            )

        for name in sorted(searchable_names):
            field = fields.get(name)
            if field is None:
                raise ValueError(f"{model.__name__}: unknown searchable field {name!r}")
            if field.kind != KIND_STRING:
                raise ValueError(f"{model.__name__}: searchable field {name!r} is not a string column")

        known_relations = set(mapper.relationships.keys())
        self.relations = tuple(relations)
        unknown_relations = sorted(set(self.relations) - known_relations)
        if unknown_relations:
            raise ValueError(f"{model.__name__}: unknown relations " + ", ".join(unknown_relations))

        by_key: dict[str, EntityField] = {}
        for field in fields.values():
            key = normalize_field_name(field.name)
            if key in by_key:
                raise ValueError(f"{model.__name__}: fields {by_key[key].name!r} and {field.name!r} collide")
            by_key[key] = field

        self.fields = fields
        self._by_key = by_key
        self.identity = fields[primary_key[0].key]
        self.searchable_fields = tuple(field for field in fields.values() if field.searchable)

    def find(self, name: str | None) -> EntityField | None:
        return self._by_key.get(normalize_field_name(name))

    def require(self, name: str | None) -> EntityField:
        field = self.find(name)
        if field is None:
            raise InvalidArgument(f"Field '{name}' not found on {self.label}")
        return field

    def load_options(self) -> list:
        return [selectinload(getattr(self.model, name)) for name in self.relations]
