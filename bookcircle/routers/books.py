from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.database import get_session
from bookcircle.models import Book
from bookcircle.schemas.book import BookCreate, BookResponse, CatalogBookSchema, SearchResult
from bookcircle.services import book_store, google_books, resolver

router = APIRouter(prefix="/api/books", tags=["books"])


def _to_result(book) -> BookResponse | CatalogBookSchema:
    if isinstance(book, Book):
        return BookResponse.model_validate(book)
    return CatalogBookSchema.from_catalog_book(book)


@router.get("", response_model=list[BookResponse])
async def list_books(
    genre: str | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    return await book_store.list_books(session, genre=genre, limit=limit, offset=offset)


@router.get("/search", response_model=list[SearchResult])
async def search_books(
    q: str = Query(..., description="Free text matched against title and author"),
    session: AsyncSession = Depends(get_session),
):
    """Local books first, then Google Books results not already in the library."""
    results = await resolver.search_books(session, q)
    return [_to_result(b) for b in results]


@router.get("/catalog", response_model=list[CatalogBookSchema])
async def search_catalog(
    q: str = Query(..., description="Free text search against Google Books"),
    limit: int = Query(10, ge=1, le=40),
):
    books = await google_books.search_catalog(q, limit=limit)
    return [CatalogBookSchema.from_catalog_book(b) for b in books]


@router.get("/catalog/{volume_id}", response_model=CatalogBookSchema)
async def get_catalog_volume(volume_id: str):
    return CatalogBookSchema.from_catalog_book(await google_books.get_volume(volume_id))


@router.post("/resolve", response_model=BookResponse)
async def resolve_book(data: CatalogBookSchema, session: AsyncSession = Depends(get_session)):
    """Find the local copy of a catalog book, creating it on first use."""
    return await resolver.find_or_create(session, data.to_catalog_book())


@router.post("", response_model=BookResponse, status_code=201)
async def create_book(data: BookCreate, session: AsyncSession = Depends(get_session)):
    return await book_store.insert_book(session, data.model_dump(mode="json"))


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: int, session: AsyncSession = Depends(get_session)):
    return await book_store.get_book(session, book_id)


@router.get("/{book_id}/similar", response_model=list[CatalogBookSchema])
async def similar_books(book_id: int, session: AsyncSession = Depends(get_session)):
    book = await book_store.get_book(session, book_id)
    first_author = book.author.split(",")[0].strip()
    books = await google_books.similar_books(book.title, first_author)
    return [CatalogBookSchema.from_catalog_book(b) for b in books]
