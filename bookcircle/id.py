import hashlib


def make_id(*parts: str | int) -> int:
    """Stable positive id for a tuple of keys, e.g. a (reading list, book) pairing.

    Fits in SQLite's signed 64-bit INTEGER.
    """
    key = "|".join(str(p).strip().lower() for p in parts)
    digest = hashlib.sha256(key.encode()).digest()
    return int.from_bytes(digest[:8], "big") >> 4
