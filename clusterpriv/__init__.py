"""Cluster privilege resolution and caching."""

from clusterpriv.core.exceptions import (InvalidArgumentError,
                                         InvalidPatternError, PrivilegeError,
                                         UnknownPrivilegeError)
from clusterpriv.models.privilege import NONE, Privilege
from clusterpriv.services.cache import PrivilegeCache, create_privilege_cache
from clusterpriv.services.catalog import (PrivilegeCatalog, build_catalog,
                                          get_default_catalog)
from clusterpriv.services.resolver import PrivilegeResolver

__version__ = "0.1.0"

__all__ = [
    "NONE",
    "Privilege",
    "PrivilegeCache",
    "PrivilegeCatalog",
    "PrivilegeResolver",
    "build_catalog",
    "create_privilege_cache",
    "get_default_catalog",
    "PrivilegeError",
    "UnknownPrivilegeError",
    "InvalidArgumentError",
    "InvalidPatternError",
]
