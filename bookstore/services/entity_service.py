from __future__ import annotations

import logging
import uuid
from typing import Any, Sequence

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from bookstore.core.errors import InvalidArgument, NotFound, PersistenceError
from bookstore.models.common import utcnow
from bookstore.schemas.query import FilterCriterion
from bookstore.services.entity_fields import EntityDefinition
from bookstore.services.filtered_query import count_entities, list_entities
from bookstore.services.patching import apply_patch

logger = logging.getLogger(__name__)


def _first_validation_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


class EntityService:
    """CRUD operations for one entity type.

    Subclasses bind ``definition`` (the entity's field registry) and
    ``upsert_schema`` (the pydantic model accepted by create/update).
    Every mutating call commits immediately.
    """

    definition: EntityDefinition
    upsert_schema: type[BaseModel]

    def __init__(self, db: Session):
        self.db = db

    @property
    def label(self) -> str:
        return self.definition.label

    def get_by_id(self, id: uuid.UUID) -> Any | None:
        identity = self.definition.identity.column
        return (
            self.db.query(self.definition.model)
            .options(*self.definition.load_options())
            .filter(identity == id)
            .first()
        )

    def list(
        self,
        filters: Sequence[FilterCriterion] | None = None,
        search_term: str | None = "",
        page_number: int = 1,
        page_size: int = 1,
        sort_field: str | None = None,
        sort_order: str | None = "asc",
    ) -> list:
        return list_entities(
            self.db,
            self.definition,
            filters=filters,
            search_term=search_term,
            page_number=page_number,
            page_size=page_size,
            sort_field=sort_field,
            sort_order=sort_order,
        )

    def count(self, filters: Sequence[FilterCriterion] | None = None, search_term: str | None = "") -> int:
        return count_entities(self.db, self.definition, filters=filters, search_term=search_term)

    def create(self, payload: BaseModel) -> uuid.UUID:
        data = payload.model_dump()
        entity_id = data.pop("id", None) or uuid.uuid4()
        row = self.definition.model(id=entity_id, **data)
        self.db.add(row)
        self._commit("create", entity_id)
        return entity_id

    def update(self, id: uuid.UUID, payload: BaseModel) -> bool:
        payload_id = getattr(payload, "id", None)
        if payload_id is not None and payload_id != id:
            raise InvalidArgument(f"{self.label} id in body ({payload_id}) does not match {id}")
        row = self._load_or_404(id)
        for key, value in payload.model_dump(exclude={"id"}).items():
            setattr(row, key, value)
        row.updated_at = utcnow()
        self.db.add(row)
        self._commit("update", id)
        return True

    def patch(self, id: uuid.UUID, operations: Sequence[Any] | None) -> bool:
        if not operations:
            raise InvalidArgument("Patch document is missing")
        row = self._load_or_404(id)
        document = self.upsert_schema.model_validate(row, from_attributes=True).model_dump(
            mode="json", exclude={"id"}
        )
        patched = apply_patch(document, operations, schema=self.upsert_schema)
        try:
            validated = self.upsert_schema.model_validate(patched)
        except ValidationError as exc:
            raise InvalidArgument(f"Patched {self.label} is invalid: {_first_validation_message(exc)}") from exc
        for key, value in validated.model_dump(exclude={"id"}).items():
            setattr(row, key, value)
        row.updated_at = utcnow()
        self.db.add(row)
        self._commit("patch", id)
        return True

    def delete(self, id: uuid.UUID) -> bool:
        row = self._load_or_404(id)
        self.db.delete(row)
        self._commit("delete", id)
        return True

    def _load_or_404(self, id: uuid.UUID):
        row = self.db.get(self.definition.model, id)
        if row is None:
            raise NotFound(f"{self.label} {id} not found")
        return row

    def _commit(self, action: str, entity_id: uuid.UUID) -> None:
        try:
            self.db.commit()
        except (IntegrityError, DataError) as exc:
            self.db.rollback()
            logger.warning("%s %s id=%s rejected by the store: %s", action, self.label, entity_id, exc.orig)
            raise PersistenceError(f"Could not {action} {self.label}: {exc.orig}") from exc
        logger.info("%s %s id=%s", action, self.label, entity_id)
