from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookcircle.database import get_session
from bookcircle.models import Post
from bookcircle.schemas.post import PostCreate, PostCreated, PostResponse, PostUpdate
from bookcircle.services import book_store, resolver
from bookcircle.services.authorization import PostAuthorizer, get_authorizer

router = APIRouter(prefix="/api/posts", tags=["posts"])


async def _get_post_or_404(session: AsyncSession, post_id: int) -> Post:
    result = await session.execute(
        select(Post)
        .where(Post.id == post_id)
        .options(selectinload(Post.book))
        .execution_options(populate_existing=True)
    )
    post = result.scalar_one_or_none()
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def _require_secret(authorizer: PostAuthorizer, post: Post, secret: str | None) -> None:
    if not authorizer.can_modify(post, secret):
        raise HTTPException(
            status_code=403,
            detail="Incorrect secret key! You can only edit/delete posts you created.",
        )


@router.get("", response_model=list[PostResponse])
async def list_posts(
    sort: Literal["created_at", "upvotes"] = "created_at",
    q: str | None = Query(None, description="Case-insensitive match on post title"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(Post).options(selectinload(Post.book))
    if q:
        stmt = stmt.where(Post.title.ilike(f"%{q}%"))
    if sort == "upvotes":
        stmt = stmt.order_by(Post.upvotes.desc(), Post.created_at.desc())
    else:
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
    stmt = stmt.offset(offset).limit(limit)
    result = await session.execute(stmt)
    return result.scalars().all()


@router.post("", response_model=PostCreated, status_code=201)
async def create_post(
    data: PostCreate,
    session: AsyncSession = Depends(get_session),
    authorizer: PostAuthorizer = Depends(get_authorizer),
):
    book_id = data.book_id
    if data.catalog_book is not None:
        book = await resolver.find_or_create(session, data.catalog_book.to_catalog_book())
        book_id = book.id
    elif book_id is not None:
        await book_store.get_book(session, book_id)

    secret, digest = authorizer.issue_secret()
    now = datetime.now(UTC)
    post = Post(
        title=data.title,
        content=data.content,
        type=data.type,
        book_id=book_id,
        rating=data.rating,
        author_name=data.author_name,
        secret_key_hash=digest,
        created_at=now,
        updated_at=now,
    )
    session.add(post)
    await session.commit()

    post = await _get_post_or_404(session, post.id)
    return PostCreated(**PostResponse.model_validate(post).model_dump(), secret_key=secret)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, session: AsyncSession = Depends(get_session)):
    return await _get_post_or_404(session, post_id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    data: PostUpdate,
    x_secret_key: str | None = Header(None),
    session: AsyncSession = Depends(get_session),
    authorizer: PostAuthorizer = Depends(get_authorizer),
):
    post = await _get_post_or_404(session, post_id)
    _require_secret(authorizer, post, x_secret_key)

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if post.type != "review":
        updates.pop("rating", None)
    for key, value in updates.items():
        setattr(post, key, value)
    await session.commit()
    return await _get_post_or_404(session, post_id)


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: int,
    x_secret_key: str | None = Header(None),
    session: AsyncSession = Depends(get_session),
    authorizer: PostAuthorizer = Depends(get_authorizer),
):
    post = await _get_post_or_404(session, post_id)
    _require_secret(authorizer, post, x_secret_key)
    await session.delete(post)
    await session.commit()


@router.post("/{post_id}/upvote", response_model=PostResponse)
async def upvote_post(post_id: int, session: AsyncSession = Depends(get_session)):
    """Increment in SQL so concurrent upvotes are never lost."""
    result = await session.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(upvotes=Post.upvotes + 1, updated_at=Post.updated_at)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="Post not found")
    await session.commit()
    return await _get_post_or_404(session, post_id)
