from dataclasses import asdict
from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from bookcircle.services.google_books import CatalogBook, cover_url_for


class BookCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=500)
    author: str = Field(min_length=1, max_length=500)
    genre: str | None = None
    publication_date: date | None = None
    description: str | None = None
    cover_image_url: str | None = None
    isbn10: str | None = Field(None, min_length=10, max_length=10)
    isbn13: str | None = Field(None, min_length=13, max_length=13)
    page_count: int | None = Field(None, ge=1)
    publisher: str | None = None

    @field_validator(
        "genre", "publication_date", "description", "cover_image_url",
        "isbn10", "isbn13", "page_count", "publisher",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BookSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    cover_image_url: str | None


class BookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source: Literal["local"] = "local"
    id: int
    title: str
    author: str
    genre: str | None
    publication_date: str | None
    description: str | None
    cover_image_url: str | None
    google_books_id: str | None
    isbn10: str | None
    isbn13: str | None
    page_count: int | None
    publisher: str | None
    google_rating: float | None
    google_ratings_count: int | None
    created_at: datetime

    @computed_field
    @property
    def display_cover_url(self) -> str:
        return cover_url_for(self)


class CatalogBookSchema(BaseModel):
    """A Google Books record, as returned by catalog searches and accepted for resolution."""

    model_config = ConfigDict(from_attributes=True)

    source: Literal["catalog"] = "catalog"
    google_books_id: str | None = None
    title: str = "Unknown Title"
    authors: list[str] = ["Unknown Author"]
    author: str = "Unknown Author"
    genre: str = "Unknown"
    categories: list[str] = []
    description: str | None = None
    publication_date: str | None = None
    page_count: int | None = Field(None, ge=1)
    publisher: str | None = None
    average_rating: float | None = None
    ratings_count: int | None = None
    language: str | None = None
    isbn10: str | None = Field(None, min_length=10, max_length=10)
    isbn13: str | None = Field(None, min_length=13, max_length=13)
    thumbnail: str | None = None
    small_thumbnail: str | None = None
    cover_image_url: str | None = None
    preview_link: str | None = None
    info_link: str | None = None

    @field_validator("google_books_id", "isbn10", "isbn13", "page_count", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # an empty catalog id would otherwise collide on the unique index
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @computed_field
    @property
    def display_cover_url(self) -> str:
        return cover_url_for(self)

    @classmethod
    def from_catalog_book(cls, book: CatalogBook) -> "CatalogBookSchema":
        return cls(**asdict(book))

    def to_catalog_book(self) -> CatalogBook:
        return CatalogBook(**self.model_dump(exclude={"source", "display_cover_url"}))


SearchResult = Annotated[BookResponse | CatalogBookSchema, Field(discriminator="source")]
