from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from bookstore.core.config import settings
from bookstore.db.session import get_db
from bookstore.schemas.patch import PatchDocument
from bookstore.services.filtered_query import parse_filters

FILTERS_DESCRIPTION = (
    'The filter criteria in JSON format: [{"PropertyName": "PropertyName", '
    '"Operator": "Equal", "Value": "FilterValue"}]'
)
TOTAL_COUNT_HEADER = "X-Total-Count"


def build_entity_router(service_cls, *, read_schema, upsert_schema) -> APIRouter:
    """HTTP surface shared by every entity: list, get, create, update, patch, delete."""
    router = APIRouter()

    def get_service(db: Session = Depends(get_db)):
        return service_cls(db)

    @router.get("", response_model=List[read_schema])
    def list_rows(
        response: Response,
        filters: Optional[str] = Query(None, description=FILTERS_DESCRIPTION),
        search_term: str = Query("", alias="searchTerm"),
        page_number: int = Query(1, alias="pageNumber"),
        page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize"),
        sort_field: Optional[str] = Query(None, alias="sortField"),
        sort_order: str = Query("asc", alias="sortOrder"),
        service=Depends(get_service),
    ):
        criteria = parse_filters(filters)
        rows = service.list(criteria, search_term, page_number, page_size, sort_field, sort_order)
        response.headers[TOTAL_COUNT_HEADER] = str(service.count(criteria, search_term))
        return rows

    @router.get("/{id}", response_model=read_schema)
    def get_row(id: UUID, service=Depends(get_service)):
        row = service.get_by_id(id)
        if row is None:
            raise HTTPException(status_code=404, detail=f"{service.label} {id} not found")
        return row

    @router.post("", status_code=201)
    def create_row(payload: upsert_schema, service=Depends(get_service)):
        return {"id": str(service.create(payload))}

    @router.put("/{id}")
    def update_row(id: UUID, payload: upsert_schema, service=Depends(get_service)):
        service.update(id, payload)
        return {"status": "updated"}

    @router.patch("/{id}")
    def patch_row(
        id: UUID,
        operations: Optional[PatchDocument] = Body(None),
        service=Depends(get_service),
    ):
        service.patch(id, operations)
        return {"status": "patched"}

    @router.delete("/{id}")
    def delete_row(id: UUID, service=Depends(get_service)):
        service.delete(id)
        return {"status": "deleted"}

    return router
