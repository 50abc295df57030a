from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from uuid import UUID


class AuthorUpsert(BaseModel):
    id: Optional[UUID] = None
    name: str = Field(min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = None
    birth_date: Optional[date] = None
    is_active: bool = True


class AuthorBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: Optional[str] = None


class BookOfAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    isbn: Optional[str] = None
    published_on: Optional[date] = None


class AuthorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: Optional[str] = None
    bio: Optional[str] = None
    birth_date: Optional[date] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    books: List[BookOfAuthor] = Field(default_factory=list)
