"""Exceptions raised while resolving privileges."""

from typing import Iterable, List, Optional


class PrivilegeError(Exception):
    """Base exception for privilege-related errors"""


class InvalidArgumentError(PrivilegeError, ValueError):
    """Resolver invoked with an argument it cannot accept"""


class InvalidPatternError(PrivilegeError, ValueError):
    """Malformed action pattern"""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"invalid action pattern [{pattern}]: {reason}")

    def __reduce__(self):
        return self.__class__, (self.pattern, self.reason)


class UnknownPrivilegeError(PrivilegeError, ValueError):
    """A token is neither a predefined privilege nor a cluster action pattern.

    Carries the full requested set and the catalog's valid names so the
    caller can correct the role definition without another lookup.
    """

    def __init__(
        self,
        names: Iterable[str],
        valid_names: Iterable[str],
        unknown: Optional[Iterable[str]] = None,
    ):
        self.names = frozenset(names)
        self.valid_names: List[str] = list(valid_names)
        self.unknown = frozenset(unknown) if unknown is not None else self.names
        super().__init__(
            f"unknown cluster privilege [{', '.join(sorted(self.names))}]. "
            "a privilege must be either one of the predefined fixed cluster "
            f"privileges [{', '.join(self.valid_names)}] or a pattern over one "
            "of the available cluster actions"
        )

    def __reduce__(self):
        return self.__class__, (self.names, self.valid_names, self.unknown)
