"""Action pattern automata.

The resolver only talks to an :class:`AutomatonEngine`. The default
:class:`RegexAutomatonEngine` compiles glob patterns to anchored regular
expressions and represents set algebra as a union of clauses, each clause
being an include pattern set minus an optional excluded automaton. That
keeps union and difference exact without building a DFA.

Glob syntax:

- ``*`` matches any run of characters, including ``/`` and ``:``
- ``?`` matches exactly one character
- ``\\`` escapes the following character
"""

import re
from dataclasses import dataclass, field
from typing import (Callable, Dict, FrozenSet, Iterable, Optional, Protocol,
                    runtime_checkable)

from clusterpriv.core.exceptions import InvalidPatternError

Predicate = Callable[[str], bool]


def glob_to_regex(pattern: str) -> str:
    """Translate a single glob pattern to an unanchored regex fragment."""
    parts = []
    escaped = False
    for ch in pattern:
        if escaped:
            parts.append(re.escape(ch))
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    if escaped:
        raise InvalidPatternError(pattern, "dangling escape character")
    return "".join(parts)


@dataclass(frozen=True)
class Clause:
    """Actions matching ``include`` and not matching ``exclude``."""

    include: FrozenSet[str]
    exclude: Optional["Automaton"] = None
    _regex: "re.Pattern" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        source = "|".join(glob_to_regex(p) for p in sorted(self.include))
        object.__setattr__(self, "_regex", re.compile(f"(?:{source})", re.DOTALL))

    def matches(self, action: str) -> bool:
        if self._regex.fullmatch(action) is None:
            return False
        return self.exclude is None or not self.exclude.matches(action)


@dataclass(frozen=True)
class Automaton:
    """Immutable, hashable set of actions."""

    clauses: FrozenSet[Clause] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.clauses

    def matches(self, action: str) -> bool:
        return any(clause.matches(action) for clause in self.clauses)


EMPTY = Automaton()


def minimize(clauses: Iterable[Clause]) -> Automaton:
    """Merge clauses sharing the same exclusion into one clause each."""
    grouped: Dict[Optional[Automaton], set] = {}
    for clause in clauses:
        if not clause.include:
            continue
        exclude = clause.exclude if clause.exclude and not clause.exclude.is_empty else None
        grouped.setdefault(exclude, set()).update(clause.include)
    return Automaton(
        frozenset(Clause(frozenset(include), exclude) for exclude, include in grouped.items())
    )


@runtime_checkable
class AutomatonEngine(Protocol):
    """Narrow interface the privilege resolver depends on."""

    def empty(self) -> Automaton: ...

    def compile(self, patterns: Iterable[str]) -> Automaton: ...

    def union(self, automata: Iterable[Automaton]) -> Automaton: ...

    def difference(self, a: Automaton, b: Automaton) -> Automaton: ...

    def as_predicate(self, automaton: Automaton) -> Predicate: ...


class RegexAutomatonEngine:
    """Automaton engine backed by the standard ``re`` module."""

    def empty(self) -> Automaton:
        return EMPTY

    def compile(self, patterns: Iterable[str]) -> Automaton:
        """Compile glob patterns into a single automaton."""
        include = frozenset(patterns)
        if not include:
            return EMPTY
        return Automaton(frozenset({Clause(include)}))

    def union(self, automata: Iterable[Automaton]) -> Automaton:
        """Union and minimize."""
        return minimize(clause for automaton in automata for clause in automaton.clauses)

    def difference(self, a: Automaton, b: Automaton) -> Automaton:
        """Actions in ``a`` that are not in ``b``, minimized."""
        if b.is_empty or a.is_empty:
            return a
        return minimize(
            Clause(
                clause.include,
                b if clause.exclude is None else self.union([clause.exclude, b]),
            )
            for clause in a.clauses
        )

    def as_predicate(self, automaton: Automaton) -> Predicate:
        if automaton.is_empty:
            return _deny_all
        return automaton.matches


def _deny_all(action: str) -> bool:
    return False


def patterns(*globs: str, engine: Optional[AutomatonEngine] = None) -> Automaton:
    """Shorthand for compiling a handful of patterns."""
    return (engine or default_engine).compile(globs)


default_engine = RegexAutomatonEngine()
