from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookcircle.database import get_session
from bookcircle.id import make_id
from bookcircle.models import ReadingList, ReadingListItem
from bookcircle.schemas.reading_list import (
    AddToListRequest,
    ReadingListCreate,
    ReadingListResponse,
    ReadingListWithBooks,
)
from bookcircle.services import book_store, resolver

router = APIRouter(prefix="/api/reading-lists", tags=["reading-lists"])


def _with_books(reading_list: ReadingList) -> ReadingListWithBooks:
    list_dict = ReadingListResponse.model_validate(reading_list).model_dump()
    list_dict["books"] = [item.book for item in reading_list.items]
    return ReadingListWithBooks(**list_dict)


async def _get_list_or_404(session: AsyncSession, list_id: int) -> ReadingList:
    result = await session.execute(
        select(ReadingList)
        .where(ReadingList.id == list_id)
        .options(selectinload(ReadingList.items).selectinload(ReadingListItem.book))
        .execution_options(populate_existing=True)
    )
    reading_list = result.scalar_one_or_none()
    if reading_list is None:
        raise HTTPException(status_code=404, detail="Reading list not found")
    return reading_list


@router.get("", response_model=list[ReadingListWithBooks])
async def list_reading_lists(session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(ReadingList)
        .options(selectinload(ReadingList.items).selectinload(ReadingListItem.book))
        .order_by(ReadingList.created_at.desc(), ReadingList.id.desc())
    )
    return [_with_books(rl) for rl in result.scalars().all()]


@router.post("", response_model=ReadingListResponse, status_code=201)
async def create_reading_list(
    data: ReadingListCreate, session: AsyncSession = Depends(get_session)
):
    reading_list = ReadingList(
        name=data.name,
        description=data.description or None,
        author_name=data.author_name,
    )
    session.add(reading_list)
    await session.commit()
    await session.refresh(reading_list)
    return reading_list


@router.get("/{list_id}", response_model=ReadingListWithBooks)
async def get_reading_list(list_id: int, session: AsyncSession = Depends(get_session)):
    return _with_books(await _get_list_or_404(session, list_id))


@router.delete("/{list_id}", status_code=204)
async def delete_reading_list(list_id: int, session: AsyncSession = Depends(get_session)):
    reading_list = await _get_list_or_404(session, list_id)
    await session.delete(reading_list)
    await session.commit()


@router.post("/{list_id}/books", status_code=201)
async def add_book_to_list(
    list_id: int, data: AddToListRequest, session: AsyncSession = Depends(get_session)
):
    await _get_list_or_404(session, list_id)

    if data.catalog_book is not None:
        book = await resolver.find_or_create(session, data.catalog_book.to_catalog_book())
    else:
        book = await book_store.get_book(session, data.book_id)

    existing = await session.execute(
        select(ReadingListItem).where(
            ReadingListItem.reading_list_id == list_id,
            ReadingListItem.book_id == book.id,
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="This book is already in the reading list")

    item = ReadingListItem(id=make_id(list_id, book.id), reading_list_id=list_id, book_id=book.id)
    session.add(item)
    await session.commit()
    return {"detail": "Book added to reading list", "book_id": book.id}


@router.delete("/{list_id}/books/{book_id}", status_code=204)
async def remove_book_from_list(
    list_id: int, book_id: int, session: AsyncSession = Depends(get_session)
):
    result = await session.execute(
        select(ReadingListItem).where(
            ReadingListItem.reading_list_id == list_id,
            ReadingListItem.book_id == book_id,
        )
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise HTTPException(status_code=404, detail="Book not in this reading list")
    await session.delete(item)
    await session.commit()
