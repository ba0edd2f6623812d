"""
In-memory registry of magic links.

Holds every issued link keyed by token. Links live until they are revoked,
observed expired by a lookup, or removed by a sweep. Nothing is persisted:
a restart forgets all links.

All operations take a single lock around the whole map, so the registry can
be shared between request handlers and the background sweeper.
"""

import secrets
import threading
import time
from typing import Callable

from .models import LinkRecord, LinkView

DEFAULT_LABEL = "Unnamed"
DEFAULT_TTL_MS = 2 * 60 * 60 * 1000  # 2 hours


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def is_expired(record: LinkRecord, now: int) -> bool:
    return now >= record.expires_at


class LinkError(Exception):
    """Base class for lookup failures on a single token."""

    def __init__(self, token: str, message: str):
        super().__init__(message)
        self.token = token


class LinkNotFound(LinkError):
    def __init__(self, token: str):
        super().__init__(token, "Link not found")


class LinkExpired(LinkError):
    def __init__(self, token: str):
        super().__init__(token, "Link has expired")


class LinkRegistry:
    def __init__(self, default_ttl_ms: int = DEFAULT_TTL_MS, clock: Callable[[], int] = now_ms):
        if default_ttl_ms <= 0:
            raise ValueError(f"Default TTL must be positive, got {default_ttl_ms}")
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._links: dict[str, LinkRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._links)

    def resolve_ttl(self, ttl_ms: int | float | None) -> int:
        """Return *ttl_ms* as whole milliseconds, or the default when missing or non-positive."""
        if ttl_ms is not None:
            ttl = int(ttl_ms)
            if ttl > 0:
                return ttl
        return self.default_ttl_ms

    def create(self, label: str | None = None, ttl_ms: int | float | None = None) -> LinkRecord:
        """Issue a new link and return a copy of its record."""
        token = secrets.token_urlsafe(32)
        ttl = self.resolve_ttl(ttl_ms)
        with self._lock:
            now = self._clock()
            record = LinkRecord(
                token=token,
                label=label or DEFAULT_LABEL,
                created_at=now,
                expires_at=now + ttl,
            )
            self._links[token] = record
            return record.model_copy()

    def lookup(self, token: str) -> LinkView:
        """
        Resolve *token* for a viewer and count the access.

        Raises ``LinkNotFound`` if the token is unknown and ``LinkExpired``
        if its deadline has passed; an expired link is deleted before
        raising.
        """
        with self._lock:
            record = self._links.get(token)
            if record is None:
                raise LinkNotFound(token)

            now = self._clock()
            if is_expired(record, now):
                del self._links[token]
                raise LinkExpired(token)

            record.access_count += 1
            return _view(record, now)

    def list_active(self, now: int | None = None) -> list[LinkView]:
        """Return all links still active at *now*, in creation order. Does not mutate."""
        with self._lock:
            if now is None:
                now = self._clock()
            return [_view(r, now) for r in self._links.values() if not is_expired(r, now)]

    def revoke(self, token: str) -> None:
        """Delete a link whatever its expiry state. Raises ``LinkNotFound`` if absent."""
        with self._lock:
            if self._links.pop(token, None) is None:
                raise LinkNotFound(token)

    def sweep(self, now: int | None = None) -> int:
        """Delete every link expired at *now*. Returns the number removed."""
        with self._lock:
            if now is None:
                now = self._clock()
            expired = [t for t, r in self._links.items() if is_expired(r, now)]
            for t in expired:
                del self._links[t]
            return len(expired)


def _view(record: LinkRecord, now: int) -> LinkView:
    return LinkView(
        token=record.token,
        label=record.label,
        created_at=record.created_at,
        expires_at=record.expires_at,
        access_count=record.access_count,
        remaining_ms=record.expires_at - now,
    )
