"""Privilege resolution services package."""

from .automaton import (Automaton, AutomatonEngine, RegexAutomatonEngine,
                        default_engine, patterns)
from .cache import PrivilegeCache, create_privilege_cache
from .catalog import PrivilegeCatalog, build_catalog, get_default_catalog
from .classifier import ActionClassifier, action_to_pattern, normalize
from .resolver import PrivilegeResolver

__all__ = [
    # Automata
    "Automaton",
    "AutomatonEngine",
    "RegexAutomatonEngine",
    "default_engine",
    "patterns",
    # Catalog
    "PrivilegeCatalog",
    "build_catalog",
    "get_default_catalog",
    # Resolution
    "ActionClassifier",
    "action_to_pattern",
    "normalize",
    "PrivilegeResolver",
    "PrivilegeCache",
    "create_privilege_cache",
]
