"""Pytest configuration and shared fixtures for clusterpriv tests."""

import threading
import time

import pytest

from clusterpriv.services.automaton import RegexAutomatonEngine
from clusterpriv.services.cache import PrivilegeCache
from clusterpriv.services.catalog import build_catalog
from clusterpriv.services.classifier import ActionClassifier
from clusterpriv.services.resolver import PrivilegeResolver

# ============================================================================
# Engine and Catalog Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def engine():
    """Regex-backed automaton engine."""
    return RegexAutomatonEngine()


@pytest.fixture(scope="session")
def catalog(engine):
    """Single catalog for the whole session; it is immutable."""
    return build_catalog(engine)


@pytest.fixture
def classifier(catalog):
    return ActionClassifier(catalog)


@pytest.fixture
def resolver(catalog):
    return PrivilegeResolver(catalog)


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def privilege_cache(resolver):
    """Unbounded cache with metrics disabled."""
    return PrivilegeCache(resolver, metrics_enabled=False)


@pytest.fixture
def bounded_cache(resolver):
    """Cache holding at most two entries."""
    return PrivilegeCache(resolver, max_entries=2, metrics_enabled=False)


class CountingResolver(PrivilegeResolver):
    """Resolver that records how often it ran."""

    def __init__(self, catalog, delay: float = 0.0):
        super().__init__(catalog)
        self.calls = 0
        self.delay = delay
        self._lock = threading.Lock()

    def resolve(self, tokens):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return super().resolve(tokens)


@pytest.fixture
def counting_resolver(catalog):
    return CountingResolver(catalog)


@pytest.fixture
def slow_resolver(catalog):
    """Resolver slow enough for concurrent callers to pile up on one key."""
    return CountingResolver(catalog, delay=0.2)


# ============================================================================
# Action Fixtures
# ============================================================================


@pytest.fixture
def sample_actions():
    """A spread of real cluster and index action names."""
    return [
        "cluster:monitor/health",
        "cluster:monitor/state",
        "cluster:monitor/nodes/liveness",
        "cluster:monitor/xpack/ml/job/get",
        "cluster:monitor/xpack/watcher/stats",
        "cluster:monitor/xpack/rollup/get",
        "cluster:monitor/data_frame/stats/get",
        "cluster:admin/xpack/ml/job/put",
        "cluster:admin/xpack/watcher/put",
        "cluster:admin/xpack/rollup/put",
        "cluster:admin/data_frame/put",
        "cluster:admin/xpack/security/user/put",
        "cluster:admin/xpack/security/user/has_privileges",
        "cluster:admin/xpack/security/token/create",
        "cluster:admin/xpack/security/token/invalidate",
        "cluster:admin/xpack/security/token/refresh",
        "cluster:admin/xpack/security/saml/authenticate",
        "cluster:admin/xpack/security/oidc/prepare",
        "cluster:admin/xpack/security/api_key/create",
        "cluster:admin/xpack/ccr/auto_follow_pattern/put",
        "cluster:admin/ingest/pipeline/put",
        "cluster:admin/snapshot/create",
        "cluster:admin/snapshot/status",
        "cluster:admin/snapshot/status[nodes]",
        "cluster:admin/ilm/put",
        "cluster:admin/ilm/get",
        "cluster:admin/ilm/operation_mode/get",
        "indices:admin/template/put",
        "indices:data/read/search",
        "internal:transport/handshake",
    ]
