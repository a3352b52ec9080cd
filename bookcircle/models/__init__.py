from bookcircle.models.book import Book
from bookcircle.models.post import Comment, Post
from bookcircle.models.reading_list import ReadingList, ReadingListItem

__all__ = ["Book", "Comment", "Post", "ReadingList", "ReadingListItem"]
