from datetime import UTC, datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookcircle.database import Base


class Book(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(500), nullable=False)
    genre: Mapped[str | None] = mapped_column(String(200))
    publication_date: Mapped[str | None] = mapped_column(String(30))
    description: Mapped[str | None] = mapped_column(Text)
    cover_image_url: Mapped[str | None] = mapped_column(String(1000))
    # NULLs never collide, so manually entered books are unconstrained
    google_books_id: Mapped[str | None] = mapped_column(String(50), unique=True)
    isbn10: Mapped[str | None] = mapped_column(String(10))
    isbn13: Mapped[str | None] = mapped_column(String(13))
    page_count: Mapped[int | None] = mapped_column(Integer)
    publisher: Mapped[str | None] = mapped_column(String(300))
    google_rating: Mapped[float | None] = mapped_column(Float)
    google_ratings_count: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    posts: Mapped[list["Post"]] = relationship(back_populates="book")
    list_items: Mapped[list["ReadingListItem"]] = relationship(back_populates="book", cascade="all, delete-orphan")
