"""Lookups and inserts against the local books table."""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.errors import NotFound, PersistenceError
from bookcircle.models import Book

logger = logging.getLogger(__name__)


async def get_book(session: AsyncSession, book_id: int) -> Book:
    book = await session.get(Book, book_id)
    if book is None:
        raise NotFound("Book not found")
    return book


async def find_by_external_id(session: AsyncSession, google_books_id: str) -> Book | None:
    result = await session.execute(select(Book).where(Book.google_books_id == google_books_id))
    return result.scalars().first()


async def find_by_title_author_substring(
    session: AsyncSession, query: str, limit: int = 10
) -> list[Book]:
    """Case-insensitive substring match on title or author."""
    pattern = f"%{query}%"
    stmt = (
        select(Book)
        .where(or_(Book.title.ilike(pattern), Book.author.ilike(pattern)))
        .order_by(Book.created_at.desc(), Book.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_books(
    session: AsyncSession,
    genre: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Book]:
    stmt = select(Book)
    if genre:
        stmt = stmt.where(Book.genre.ilike(genre))
    stmt = stmt.order_by(Book.created_at.desc(), Book.id.desc()).offset(offset).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def insert_book(session: AsyncSession, data: dict) -> Book:
    """Persist a new book and return it with its id.

    Constraint violations and store failures surface as PersistenceError.
    """
    book = Book(**data)
    session.add(book)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.warning("Book insert rejected for '%s': %s", data.get("title"), e.orig)
        raise PersistenceError("A book with this catalog id already exists") from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Book insert failed for '%s': %s", data.get("title"), e)
        raise PersistenceError() from e
    await session.refresh(book)
    logger.info("Created book %d '%s'", book.id, book.title)
    return book
