from bookstore.models.author import Author
from bookstore.models.books import Books
from bookstore.services.entity_fields import EntityDefinition

# Both models are imported above so their relationships resolve before the
# mappers are inspected.
AUTHOR_DEFINITION = EntityDefinition(
    Author,
    label="Author",
    searchable=("name", "email", "bio"),
    relations=("books",),
)
BOOKS_DEFINITION = EntityDefinition(
    Books,
    label="Books",
    searchable=("title", "isbn", "summary"),
    relations=("author",),
)
