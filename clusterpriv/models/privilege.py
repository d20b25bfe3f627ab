"""Privilege value type."""

from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Iterable


def _deny_all(action: str) -> bool:
    return False


@dataclass(frozen=True, eq=False)
class Privilege:
    """A named or ad hoc grant over cluster actions.

    ``names`` is the lower-cased set of tokens the privilege was resolved
    from. ``automaton`` is opaque to everything except the engine that
    built it; ``predicate`` is that engine's membership test for it.

    Two privileges with equal ``names`` grant the same actions, so equality
    and hashing only look at ``names``.
    """

    names: FrozenSet[str]
    automaton: Any = field(repr=False)
    predicate: Callable[[str], bool] = field(default=_deny_all, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", frozenset(self.names))

    @classmethod
    def named(cls, name: str, automaton: Any, predicate: Callable[[str], bool]) -> "Privilege":
        return cls(frozenset({name}), automaton, predicate)

    @property
    def name(self) -> str:
        """Comma-joined sorted names, for display."""
        return ",".join(sorted(self.names))

    def permits(self, action: str) -> bool:
        """Check if the action is granted by this privilege."""
        return self.predicate(action)

    def permits_all(self, actions: Iterable[str]) -> bool:
        return all(self.predicate(action) for action in actions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Privilege):
            return NotImplemented
        return self.names == other.names

    def __hash__(self) -> int:
        return hash(self.names)


# Grants nothing. Returned for an empty or missing token set.
NONE = Privilege(frozenset({"none"}), None, _deny_all)
