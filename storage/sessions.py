"""
In-memory holder for the current private key and CSR.

Exactly one key/CSR pair is held at a time.  Each call to ``put`` replaces
it and mints a new session id; a caller that passes a session id to ``get``
only receives the pair it generated, and gets ``CsrNotFound`` once that pair
has been superseded or has expired.  Callers that pass no session id get
whatever pair is current.

All access goes through one lock, so a reader never sees the key from one
generation paired with the CSR from another.
"""
from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from cryptography.hazmat.primitives.asymmetric import rsa


class CsrNotFound(LookupError):
    """No CSR is available for the requested session."""


@dataclass(frozen=True)
class CsrEntry:
    private_key: rsa.RSAPrivateKey = field(repr=False)
    csr_pem: bytes
    session_id: str
    created_at: float


class CsrStore:
    """Single-slot, lock-guarded store with optional expiry."""

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: Optional[CsrEntry] = None

    def put(self, private_key: rsa.RSAPrivateKey, csr_pem: bytes) -> CsrEntry:
        """Replace the current pair and return the new entry."""
        entry = CsrEntry(
            private_key=private_key,
            csr_pem=csr_pem,
            session_id=uuid.uuid4().hex,
            created_at=self._clock(),
        )
        with self._lock:
            self._entry = entry
        return entry

    def get(self, session_id: Optional[str] = None) -> CsrEntry:
        """Return the current entry, or raise CsrNotFound."""
        with self._lock:
            entry = self._entry
            if entry is not None and self._expired(entry):
                self._entry = entry = None

        if entry is None:
            raise CsrNotFound("no CSR has been generated")
        if session_id is not None and session_id != entry.session_id:
            raise CsrNotFound(f"session {session_id} is not current")
        return entry

    def _expired(self, entry: CsrEntry) -> bool:
        if self._ttl is None:
            return False
        return self._clock() - entry.created_at >= self._ttl
