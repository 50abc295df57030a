from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from uuid import UUID

from bookstore.schemas.author import AuthorBrief


class BooksUpsert(BaseModel):
    id: Optional[UUID] = None
    title: str = Field(min_length=1, max_length=300)
    isbn: Optional[str] = Field(default=None, max_length=20)
    summary: Optional[str] = None
    published_on: Optional[date] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    page_count: Optional[int] = Field(default=None, ge=0, le=2_147_483_647)
    in_stock: bool = True
    author_id: UUID


class BooksRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    isbn: Optional[str] = None
    summary: Optional[str] = None
    published_on: Optional[date] = None
    price: Optional[Decimal] = None
    page_count: Optional[int] = None
    in_stock: bool
    author_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[AuthorBrief] = None
