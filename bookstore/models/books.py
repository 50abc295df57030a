from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.db.session import Base
from bookstore.models.common import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from bookstore.models.author import Author


class Books(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "books"
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    isbn: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    in_stock: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("authors.id"), nullable=False, index=True
    )

    author: Mapped[Author] = relationship(back_populates="books")
