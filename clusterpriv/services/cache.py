"""Concurrent memoization of privilege resolution."""

import copy
import threading
import time
from typing import Any, Dict, FrozenSet, Iterable, Optional

from clusterpriv.config.settings import Settings, get_settings
from clusterpriv.core.exceptions import PrivilegeError
from clusterpriv.core.logging import (get_logger, get_logger_with_context,
                                     log_event)
from clusterpriv.core.metrics import (privilege_cache_operations,
                                      privilege_resolution_duration,
                                      privilege_resolution_errors)
from clusterpriv.models.privilege import NONE, Privilege
from clusterpriv.services.catalog import PrivilegeCatalog, get_default_catalog
from clusterpriv.services.classifier import normalize
from clusterpriv.services.resolver import PrivilegeResolver

logger = get_logger(__name__)

CacheKey = FrozenSet[str]


class _Flight:
    """One in-progress resolution that other callers can wait on."""

    __slots__ = ("done", "result", "error")

    def __init__(self):
        self.done = threading.Event()
        self.result: Optional[Privilege] = None
        self.error: Optional[BaseException] = None


def _for_waiter(error: BaseException, key: CacheKey) -> PrivilegeError:
    """Build the exception a waiting caller raises for a failed flight.

    Each waiter gets its own instance so tracebacks from different threads
    never pile up on the leader's exception.
    """
    if isinstance(error, PrivilegeError):
        return copy.copy(error)
    wrapped = PrivilegeError(f"resolution of [{', '.join(sorted(key))}] failed")
    wrapped.__cause__ = error
    return wrapped


class PrivilegeCache:
    """Memoizes :meth:`PrivilegeResolver.resolve` by token-set content.

    Hits are plain dictionary reads. On a miss the first caller for a key
    resolves it while later callers for the same key wait for that
    result; callers for other keys are never held up. Failed resolutions
    are not stored.

    With ``max_entries`` above zero the oldest stored entries are evicted
    once the bound is reached.
    """

    def __init__(
        self,
        resolver: PrivilegeResolver,
        enabled: bool = True,
        max_entries: int = 0,
        metrics_enabled: bool = True,
    ):
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self.resolver = resolver
        self.enabled = enabled
        self.max_entries = max_entries
        self.metrics_enabled = metrics_enabled

        self._entries: Dict[CacheKey, Privilege] = {}
        self._inflight: Dict[CacheKey, _Flight] = {}
        self._lock = threading.Lock()
        # Guards the counters only. Taken inside _lock, never the other way round.
        self._stats_lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._resolutions = 0
        self._failures = 0
        self._evictions = 0

    def get(self, tokens: Optional[Iterable[str]]) -> Privilege:
        """Get the privilege granting the union of ``tokens``."""
        if tokens is None:
            return NONE
        key = frozenset(normalize(token) for token in tokens)
        if not key:
            return NONE

        if not self.enabled:
            self._count("_misses")
            return self._resolve(key)

        privilege = self._entries.get(key)
        if privilege is not None:
            self._record_hit()
            return privilege

        return self._compute_if_absent(key)

    def _compute_if_absent(self, key: CacheKey) -> Privilege:
        with self._lock:
            privilege = self._entries.get(key)
            if privilege is not None:
                self._record_hit()
                return privilege
            flight = self._inflight.get(key)
            leader = flight is None
            if leader:
                flight = _Flight()
                self._inflight[key] = flight
            self._count("_misses")

        if not leader:
            self._record_operation("get", "wait")
            flight.done.wait()
            if flight.error is not None:
                raise _for_waiter(flight.error, key)
            return flight.result

        self._record_operation("get", "miss")
        try:
            privilege = self._resolve(key)
        except BaseException as exc:
            with self._lock:
                del self._inflight[key]
            flight.error = exc
            flight.done.set()
            raise

        with self._lock:
            privilege = self._store(key, privilege)
            del self._inflight[key]
        flight.result = privilege
        flight.done.set()
        return privilege

    def _store(self, key: CacheKey, privilege: Privilege) -> Privilege:
        # Caller holds self._lock.
        existing = self._entries.get(key)
        if existing is not None:
            return existing
        if self.max_entries:
            while len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                self._count("_evictions")
                self._record_operation("evict", "success")
        self._entries[key] = privilege
        return privilege

    def _resolve(self, key: CacheKey) -> Privilege:
        key_logger = get_logger_with_context(__name__, names=key)
        start = time.perf_counter()
        try:
            privilege = self.resolver.resolve(key)
        except PrivilegeError as exc:
            self._count("_failures")
            if self.metrics_enabled:
                privilege_resolution_errors.labels(error_type=type(exc).__name__).inc()
            log_event(
                key_logger,
                "warning",
                "privilege_resolution_failed",
                names=sorted(key),
                error=str(exc),
            )
            raise

        duration = time.perf_counter() - start
        self._count("_resolutions")
        if self.metrics_enabled:
            privilege_resolution_duration.observe(duration)
        log_event(
            key_logger,
            "debug",
            "privilege_resolved",
            names=sorted(key),
            duration_ms=round(duration * 1000, 3),
        )
        return privilege

    def _count(self, counter: str) -> None:
        with self._stats_lock:
            setattr(self, counter, getattr(self, counter) + 1)

    def _record_hit(self) -> None:
        self._count("_hits")
        self._record_operation("get", "hit")

    def _record_operation(self, operation: str, result: str) -> None:
        if self.metrics_enabled:
            privilege_cache_operations.labels(operation=operation, result=result).inc()

    def clear(self) -> int:
        """Drop every stored entry. Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries = {}
        if count:
            logger.info(f"Cleared {count} cached privileges")
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, tokens: object) -> bool:
        if not isinstance(tokens, (set, frozenset, list, tuple)):
            return False
        return frozenset(normalize(t) for t in tokens) in self._entries

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._stats_lock:
            hits, misses = self._hits, self._misses
            resolutions, failures = self._resolutions, self._failures
            evictions = self._evictions
        total_requests = hits + misses

        return {
            "cache_enabled": self.enabled,
            "max_entries": self.max_entries,
            "size": len(self._entries),
            "cache_hits": hits,
            "cache_misses": misses,
            "resolutions": resolutions,
            "failures": failures,
            "evictions": evictions,
            "total_requests": total_requests,
            "cache_hit_rate": (hits / total_requests if total_requests > 0 else 0),
        }


def create_privilege_cache(
    catalog: Optional[PrivilegeCatalog] = None,
    settings: Optional[Settings] = None,
) -> PrivilegeCache:
    """Create a privilege cache configured from settings."""
    settings = settings or get_settings()
    catalog = catalog or get_default_catalog()
    return PrivilegeCache(
        PrivilegeResolver(catalog),
        enabled=settings.cache_enabled,
        max_entries=settings.cache_max_entries,
        metrics_enabled=settings.metrics_enabled,
    )
