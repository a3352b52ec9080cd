"""Domain errors raised by the services and mapped to HTTP responses in the app."""


class BookCircleError(Exception):
    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class CatalogUnavailable(BookCircleError):
    """The external catalog could not be reached or answered non-2xx."""

    status_code = 502
    default_detail = "Failed to search books. Please try again."


class PersistenceError(BookCircleError):
    status_code = 500
    default_detail = "Failed to save to the database"


class NotFound(BookCircleError):
    status_code = 404
    default_detail = "Not found"
