from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bookcircle.schemas.book import BookSummary, CatalogBookSchema


class ReadingListCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    author_name: str = Field(min_length=1, max_length=100)


class ReadingListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    author_name: str
    created_at: datetime


class ReadingListWithBooks(ReadingListResponse):
    books: list[BookSummary] = []


class AddToListRequest(BaseModel):
    book_id: int | None = None
    catalog_book: CatalogBookSchema | None = None

    @model_validator(mode="after")
    def check_one_book(self):
        if (self.book_id is None) == (self.catalog_book is None):
            raise ValueError("Provide exactly one of book_id or catalog_book")
        return self
