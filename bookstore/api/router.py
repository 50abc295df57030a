from fastapi import APIRouter
from bookstore.api import author, books

router = APIRouter()
router.include_router(books.router, prefix="/books", tags=["Books"])
router.include_router(author.router, prefix="/author", tags=["Author"])
