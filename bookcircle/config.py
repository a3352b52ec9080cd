import os
from pathlib import Path

DB_PATH = os.environ.get("BOOKCIRCLE_DB_PATH", str(Path.cwd() / "bookcircle.db"))
DATABASE_URL = f"sqlite+aiosqlite:///{DB_PATH}"

LOG_LEVEL = os.environ.get("BOOKCIRCLE_LOG_LEVEL", "INFO")

# Google Books API settings
GOOGLE_BOOKS_BASE_URL = os.environ.get("BOOKCIRCLE_GB_BASE_URL", "https://www.googleapis.com/books/v1")
GOOGLE_BOOKS_API_KEY = os.environ.get("BOOKCIRCLE_GB_API_KEY") or None
GOOGLE_BOOKS_TIMEOUT = float(os.environ.get("BOOKCIRCLE_GB_TIMEOUT", "10.0"))

PLACEHOLDER_COVER_URL = os.environ.get(
    "BOOKCIRCLE_PLACEHOLDER_COVER_URL", "https://via.placeholder.com/128x196/e3e3e3/666666"
)

# Search fan-out sizes and input debounce
LOCAL_SEARCH_LIMIT = 10
CATALOG_SEARCH_LIMIT = 5
SEARCH_DEBOUNCE_SECONDS = float(os.environ.get("BOOKCIRCLE_SEARCH_DEBOUNCE", "0.5"))
