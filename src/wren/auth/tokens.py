"""Access tokens and the collaborators that resolve them.

The token store and identity service belong to the host application
(typically backed by its user tables). Wren only reads from them. Both
protocols accept sync or async implementations.

Reference implementations are provided for tests and small deployments::

    store = MemoryTokenStore()
    store.add(AccessToken("s3cr3t", user_id="42", scopes=frozenset({"shop"})))

    app = ApiApp(token_store=store, identity=ContextIdentity(superusers={"1"}))
"""

from __future__ import annotations

import threading
import time
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from wren.context import caller_var


@dataclass(frozen=True, slots=True)
class AccessToken:
    """An opaque bearer credential resolved to a user and a set of scopes."""

    value: str
    user_id: str
    scopes: frozenset[str] = field(default_factory=frozenset)
    expires_at: float | None = None

    def is_expired(self, now: float | None = None) -> bool:
        """True once ``expires_at`` has passed. Tokens without expiry never expire."""
        if self.expires_at is None:
            return False
        return (time.time() if now is None else now) >= self.expires_at


@runtime_checkable
class TokenStore(Protocol):
    """Looks up access tokens.

    ``get_by_valid_token`` returns ``None`` for unknown *and* expired tokens.
    """

    def get_by_valid_token(self, token: str) -> AccessToken | None | Awaitable[AccessToken | None]: ...

    def has_scope(self, token: AccessToken, scope: str) -> bool | Awaitable[bool]: ...


@runtime_checkable
class IdentityService(Protocol):
    """Establishes who the caller is for the remainder of the request."""

    def set_caller_identity(self, user_id: str) -> None | Awaitable[None]: ...

    def is_superuser(self, user_id: str | None) -> bool | Awaitable[bool]: ...


class MemoryTokenStore:
    """In-process token store. Thread-safe."""

    __slots__ = ("_lock", "_tokens")

    def __init__(self, tokens: Iterable[AccessToken] = ()) -> None:
        self._lock = threading.Lock()
        self._tokens: dict[str, AccessToken] = {t.value: t for t in tokens}

    def add(self, token: AccessToken) -> None:
        with self._lock:
            self._tokens[token.value] = token

    def revoke(self, value: str) -> None:
        with self._lock:
            self._tokens.pop(value, None)

    def get_by_valid_token(self, token: str) -> AccessToken | None:
        with self._lock:
            found = self._tokens.get(token)
        if found is None or found.is_expired():
            return None
        return found

    def has_scope(self, token: AccessToken, scope: str) -> bool:
        return scope in token.scopes


class ContextIdentity:
    """Identity held in a request-scoped context variable.

    ``superusers`` lists the user ids that may see exception details on
    error envelopes.
    """

    __slots__ = ("superusers",)

    def __init__(self, superusers: Iterable[str] = ()) -> None:
        self.superusers = frozenset(superusers)

    def set_caller_identity(self, user_id: str) -> None:
        caller_var.set(user_id)

    def is_superuser(self, user_id: str | None) -> bool:
        return user_id is not None and user_id in self.superusers
