from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.database import get_session
from bookcircle.models import Comment, Post
from bookcircle.schemas.comment import CommentCreate, CommentResponse

router = APIRouter(tags=["comments"])


async def _ensure_post(session: AsyncSession, post_id: int) -> None:
    if await session.get(Post, post_id) is None:
        raise HTTPException(status_code=404, detail="Post not found")


@router.get("/api/posts/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: int, session: AsyncSession = Depends(get_session)):
    await _ensure_post(session, post_id)
    result = await session.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at, Comment.id)
    )
    return result.scalars().all()


@router.post("/api/posts/{post_id}/comments", response_model=CommentResponse, status_code=201)
async def create_comment(
    post_id: int, data: CommentCreate, session: AsyncSession = Depends(get_session)
):
    await _ensure_post(session, post_id)
    comment = Comment(post_id=post_id, **data.model_dump())
    session.add(comment)
    await session.commit()
    await session.refresh(comment)
    return comment


@router.delete("/api/comments/{comment_id}", status_code=204)
async def delete_comment(comment_id: int, session: AsyncSession = Depends(get_session)):
    comment = await session.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    await session.delete(comment)
    await session.commit()
