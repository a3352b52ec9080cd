from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookcircle.database import Base


class ReadingListItem(Base):
    __tablename__ = "reading_list_items"
    __table_args__ = (UniqueConstraint("reading_list_id", "book_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    reading_list_id: Mapped[int] = mapped_column(ForeignKey("reading_lists.id", ondelete="CASCADE"))
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id", ondelete="CASCADE"))
    added_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    reading_list: Mapped["ReadingList"] = relationship(back_populates="items")
    book: Mapped["Book"] = relationship(back_populates="list_items")


class ReadingList(Base):
    __tablename__ = "reading_lists"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000))
    author_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    items: Mapped[list["ReadingListItem"]] = relationship(back_populates="reading_list", cascade="all, delete-orphan")
