from bookstore.schemas.author import AuthorUpsert
from bookstore.services.catalog import AUTHOR_DEFINITION
from bookstore.services.entity_service import EntityService


class AuthorService(EntityService):
    """Adding, retrieving, updating and deleting authors."""

    definition = AUTHOR_DEFINITION
    upsert_schema = AuthorUpsert
