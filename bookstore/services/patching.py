from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, TypeAdapter, ValidationError

from bookstore.core.errors import InvalidArgument
from bookstore.schemas.patch import (
    CheckOperation,
    CopyOperation,
    MoveOperation,
    RemoveOperation,
    ReplaceOperation,
    SetOperation,
)
from bookstore.services.entity_fields import normalize_field_name


def _field_for_path(document: dict[str, Any], path: str | None) -> str:
    text = str(path or "").strip()
    # Entities are flat documents: only "/<field>" pointers are addressable.
    if not text.startswith("/") or text.count("/") != 1 or len(text) == 1:
        raise InvalidArgument(f"Unsupported patch path '{path}'")
    key = normalize_field_name(text[1:])
    for name in document:
        if normalize_field_name(name) == key:
            return name
    raise InvalidArgument(f"Unknown patch path '{path}'")


def _values_equal(schema: type[BaseModel] | None, field_name: str, current: Any, expected: Any) -> bool:
    if current == expected:
        return True
    if schema is None or field_name not in schema.model_fields:
        return False
    adapter = TypeAdapter(schema.model_fields[field_name].annotation)
    try:
        return adapter.validate_python(current) == adapter.validate_python(expected)
    except ValidationError:
        return False


def apply_patch(
    document: dict[str, Any],
    operations: Sequence[Any] | None,
    *,
    schema: type[BaseModel] | None = None,
) -> dict[str, Any]:
    """Apply ``operations`` in order to a copy of ``document`` and return the copy.

    ``document`` maps every patchable field to its current JSON value.
    ``schema`` is only used to compare typed values for ``test`` operations
    (``12.5`` and ``"12.50"`` are the same price).
    """
    if not operations:
        raise InvalidArgument("Patch document is missing")

    result = dict(document)
    for operation in operations:
        target = _field_for_path(result, operation.path)
        if isinstance(operation, (SetOperation, ReplaceOperation)):
            result[target] = operation.value
        elif isinstance(operation, RemoveOperation):
            result[target] = None
        elif isinstance(operation, MoveOperation):
            source = _field_for_path(result, operation.from_path)
            if source != target:
                result[target] = result[source]
                result[source] = None
        elif isinstance(operation, CopyOperation):
            source = _field_for_path(result, operation.from_path)
            result[target] = result[source]
        elif isinstance(operation, CheckOperation):
            if not _values_equal(schema, target, result[target], operation.value):
                raise InvalidArgument(f"Patch test failed for '{operation.path}'")
        else:
            raise InvalidArgument(f"Unsupported patch operation {operation!r}")
    return result
