"""
In-memory artifact cache with per-entry expiry and a background sweeper.
"""

import logging
import secrets
import threading
import time
from collections import OrderedDict
from typing import Callable, NamedTuple, Optional

LOG = logging.getLogger("qris_service.cache")

DEFAULT_TTL = 300
DEFAULT_SWEEP_INTERVAL = 60


class _Entry(NamedTuple):
    payload: bytes
    expires_at: float


class ArtifactCache:
    """
    Maps opaque ids to artifact bytes until they expire.

    Expiry is checked lazily on ``get`` and eagerly by ``sweep``, which
    ``start_sweep`` runs every ``sweep_interval`` seconds on a daemon thread.
    ``clock`` must be monotonic-ish and return seconds.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self.max_entries = max_entries or None
        self._clock = clock
        self._entries = OrderedDict()
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = None

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def _new_id(self) -> str:
        return f"{int(time.time() * 1000):x}{secrets.token_hex(8)}"

    def put(self, payload: bytes, ttl: Optional[float] = None) -> str:
        expires_at = self._clock() + (self.ttl if ttl is None else ttl)
        with self._lock:
            artifact_id = self._new_id()
            while artifact_id in self._entries:
                artifact_id = self._new_id()
            self._entries[artifact_id] = _Entry(payload, expires_at)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    LOG.warning("cache full, evicted oldest artifact %s", evicted)
        return artifact_id

    def get(self, artifact_id: str) -> Optional[bytes]:
        with self._lock:
            entry = self._entries.get(artifact_id)
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry.payload

    def sweep(self) -> int:
        """Remove expired entries; returns how many were evicted."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            LOG.debug("swept %d expired artifacts", len(expired))
        return len(expired)

    def _run(self):
        while not self._stop.wait(self.sweep_interval):
            try:
                self.sweep()
            except Exception:
                LOG.exception("artifact sweep failed")

    def start_sweep(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="artifact-sweeper", daemon=True)
        self._thread.start()
        LOG.info("artifact sweeper started (interval=%ss)", self.sweep_interval)

    def stop_sweep(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def sweeping(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
