from bookstore.api.entity_router import build_entity_router
from bookstore.schemas.author import AuthorRead, AuthorUpsert
from bookstore.services.author_service import AuthorService

router = build_entity_router(AuthorService, read_schema=AuthorRead, upsert_schema=AuthorUpsert)
