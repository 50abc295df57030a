from bookstore.schemas.books import BooksUpsert
from bookstore.services.catalog import BOOKS_DEFINITION
from bookstore.services.entity_service import EntityService


class BooksService(EntityService):
    """Adding, retrieving, updating and deleting books."""

    definition = BOOKS_DEFINITION
    upsert_schema = BooksUpsert
