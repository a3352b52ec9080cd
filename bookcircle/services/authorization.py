"""Edit/delete authorization for posts.

Posts have no owner accounts. Whoever creates a post receives a one-time
secret; presenting it later authorizes edits and deletion. The check is
behind the PostAuthorizer protocol so a real auth service can replace it
through the ``get_authorizer`` dependency.
"""

import hashlib
import hmac
import secrets
from typing import Protocol

from bookcircle.models import Post


class PostAuthorizer(Protocol):
    def issue_secret(self) -> tuple[str, str]:
        """Return (secret handed to the author, digest stored on the post)."""
        ...

    def can_modify(self, post: Post, secret: str | None) -> bool: ...


class SecretKeyAuthorizer:
    def issue_secret(self) -> tuple[str, str]:
        secret = secrets.token_urlsafe(16)
        return secret, self._digest(secret)

    def can_modify(self, post: Post, secret: str | None) -> bool:
        if not secret or not secret.strip():
            return False
        return hmac.compare_digest(self._digest(secret.strip()), post.secret_key_hash)

    @staticmethod
    def _digest(secret: str) -> str:
        return hashlib.sha256(secret.encode()).hexdigest()


_default_authorizer = SecretKeyAuthorizer()


def get_authorizer() -> PostAuthorizer:
    return _default_authorizer
