from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bookcircle.schemas.book import BookSummary, CatalogBookSchema


class PostCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)
    content: str = ""
    type: Literal["review", "discussion"] = "discussion"
    book_id: int | None = None
    catalog_book: CatalogBookSchema | None = None
    rating: int | None = Field(None, ge=1, le=5)
    author_name: str = Field(min_length=1, max_length=100)

    @model_validator(mode="after")
    def check_review_fields(self):
        if self.book_id is not None and self.catalog_book is not None:
            raise ValueError("Provide either book_id or catalog_book, not both")
        if self.type == "review":
            if self.rating is None:
                raise ValueError("Please provide a rating between 1 and 5 stars")
            if self.book_id is None and self.catalog_book is None:
                raise ValueError("Please select a book for your review")
        else:
            self.rating = None
        return self


class PostUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = None
    rating: int | None = Field(None, ge=1, le=5)


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    book_id: int | None
    type: str
    title: str
    content: str
    rating: int | None
    author_name: str
    upvotes: int
    created_at: datetime
    updated_at: datetime
    book: BookSummary | None = None


class PostCreated(PostResponse):
    secret_key: str = Field(description="Shown once; required to edit or delete the post")
