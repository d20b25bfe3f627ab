"""Predefined cluster privileges."""

import threading
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from clusterpriv.core.logging import get_logger
from clusterpriv.models.privilege import NONE, Privilege
from clusterpriv.services import actions
from clusterpriv.services.automaton import (AutomatonEngine, default_engine,
                                            patterns)

logger = get_logger(__name__)

ALL = "all"


class PrivilegeCatalog:
    """Immutable table of named privileges.

    Built once, then shared by reference between resolvers and caches.
    Reads need no locking.
    """

    def __init__(self, privileges: Iterable[Privilege], engine: AutomatonEngine):
        entries: Dict[str, Privilege] = {}
        for privilege in privileges:
            if len(privilege.names) != 1:
                raise ValueError(
                    f"catalog privileges must carry exactly one name, got [{privilege.name}]"
                )
            (name,) = privilege.names
            if name in entries:
                raise ValueError(f"duplicate catalog privilege [{name}]")
            entries[name] = privilege
        if ALL not in entries:
            raise ValueError(f"catalog must define the [{ALL}] privilege")

        self._entries: Mapping[str, Privilege] = MappingProxyType(entries)
        self._names = tuple(entries)
        self._engine = engine

    @property
    def engine(self) -> AutomatonEngine:
        return self._engine

    def lookup(self, name: str) -> Optional[Privilege]:
        """Return the privilege registered under ``name``, if any."""
        return self._entries.get(name)

    def all(self) -> Privilege:
        """The maximal grant. Anything it permits is a cluster action."""
        return self._entries[ALL]

    def names(self) -> List[str]:
        """Catalog names in declaration order."""
        return list(self._names)

    valid_names = names

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Privilege]:
        return iter(self._entries.values())


def build_catalog(engine: Optional[AutomatonEngine] = None) -> PrivilegeCatalog:
    """Build the predefined cluster privilege catalog.

    Later automata are derived from earlier ones, so the order below
    matters.
    """
    engine = engine or default_engine

    def compile_(*globs: str):
        return patterns(*globs, engine=engine)

    manage_security = compile_("cluster:admin/xpack/security/*")
    manage_saml = compile_(
        "cluster:admin/xpack/security/saml/*",
        actions.INVALIDATE_TOKEN,
        actions.REFRESH_TOKEN,
    )
    manage_oidc = compile_("cluster:admin/xpack/security/oidc/*")
    manage_token = compile_("cluster:admin/xpack/security/token/*")
    manage_api_key = compile_("cluster:admin/xpack/security/api_key/*")
    monitor = compile_("cluster:monitor/*")
    monitor_ml = compile_("cluster:monitor/xpack/ml/*")
    monitor_data_frame = compile_("cluster:monitor/data_frame/*")
    monitor_watcher = compile_("cluster:monitor/xpack/watcher/*")
    monitor_rollup = compile_("cluster:monitor/xpack/rollup/*")
    all_cluster = compile_("cluster:*", "indices:admin/template/*")
    manage = engine.difference(all_cluster, manage_security)
    manage_ml = compile_("cluster:admin/xpack/ml/*", "cluster:monitor/xpack/ml/*")
    manage_data_frame = compile_("cluster:admin/data_frame/*", "cluster:monitor/data_frame/*")
    manage_watcher = compile_("cluster:admin/xpack/watcher/*", "cluster:monitor/xpack/watcher/*")
    transport_client = compile_(actions.NODES_LIVENESS, actions.CLUSTER_STATE)
    manage_index_templates = compile_("indices:admin/template/*")
    manage_ingest_pipelines = compile_("cluster:admin/ingest/pipeline/*")
    manage_rollup = compile_("cluster:admin/xpack/rollup/*", "cluster:monitor/xpack/rollup/*")
    manage_ccr = compile_("cluster:admin/xpack/ccr/*", actions.CLUSTER_STATE, actions.HAS_PRIVILEGES)
    create_snapshot = compile_(
        actions.CREATE_SNAPSHOT,
        actions.SNAPSHOTS_STATUS + "*",
        actions.GET_SNAPSHOTS,
        actions.SNAPSHOTS_STATUS,
        actions.GET_REPOSITORIES,
    )
    read_ccr = compile_(actions.CLUSTER_STATE, actions.HAS_PRIVILEGES)
    manage_ilm = compile_("cluster:admin/ilm/*")
    read_ilm = compile_(actions.GET_LIFECYCLE, actions.GET_ILM_STATUS)

    def entry(name: str, automaton) -> Privilege:
        return Privilege.named(name, automaton, engine.as_predicate(automaton))

    catalog = PrivilegeCatalog(
        [
            NONE,
            entry(ALL, all_cluster),
            entry("monitor", monitor),
            entry("monitor_ml", monitor_ml),
            entry("monitor_data_frame_transforms", monitor_data_frame),
            entry("monitor_watcher", monitor_watcher),
            entry("monitor_rollup", monitor_rollup),
            entry("manage", manage),
            entry("manage_ml", manage_ml),
            entry("manage_data_frame_transforms", manage_data_frame),
            entry("manage_token", manage_token),
            entry("manage_watcher", manage_watcher),
            entry("manage_index_templates", manage_index_templates),
            entry("manage_ingest_pipelines", manage_ingest_pipelines),
            entry("transport_client", transport_client),
            entry("manage_security", manage_security),
            entry("manage_saml", manage_saml),
            entry("manage_oidc", manage_oidc),
            entry("manage_api_key", manage_api_key),
            entry("manage_pipeline", manage_ingest_pipelines),
            entry("manage_rollup", manage_rollup),
            entry("manage_ccr", manage_ccr),
            entry("read_ccr", read_ccr),
            entry("create_snapshot", create_snapshot),
            entry("manage_ilm", manage_ilm),
            entry("read_ilm", read_ilm),
        ],
        engine,
    )
    logger.info(f"Built privilege catalog with {len(catalog)} privileges")
    return catalog


_default_catalog: Optional[PrivilegeCatalog] = None
_default_catalog_lock = threading.Lock()


def get_default_catalog() -> PrivilegeCatalog:
    """Get the process-wide catalog, building it on first use."""
    global _default_catalog
    if _default_catalog is None:
        with _default_catalog_lock:
            if _default_catalog is None:
                _default_catalog = build_catalog()
    return _default_catalog
