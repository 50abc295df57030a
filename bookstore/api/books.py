from bookstore.api.entity_router import build_entity_router
from bookstore.schemas.books import BooksRead, BooksUpsert
from bookstore.services.books_service import BooksService

router = build_entity_router(BooksService, read_schema=BooksRead, upsert_schema=BooksUpsert)
