from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bookcircle.errors import BookCircleError
from bookcircle.routers import books, comments, posts, reading_lists


async def _domain_error_handler(request: Request, exc: BookCircleError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app() -> FastAPI:
    app = FastAPI(title="Bookcircle", version="0.1.0")
    app.add_exception_handler(BookCircleError, _domain_error_handler)
    app.include_router(books.router)
    app.include_router(posts.router)
    app.include_router(comments.router)
    app.include_router(reading_lists.router)
    return app


app = create_app()
