"""Combining privilege tokens into a single privilege."""

from typing import Iterable, List, Optional, Set

from clusterpriv.core.exceptions import (InvalidArgumentError,
                                         UnknownPrivilegeError)
from clusterpriv.models.privilege import Privilege
from clusterpriv.services.catalog import PrivilegeCatalog
from clusterpriv.services.classifier import ActionClassifier, normalize


class PrivilegeResolver:
    """Resolves a non-empty token set into one privilege.

    Tokens are either names from the catalog or patterns over cluster
    actions. The result grants the union of everything they imply.
    Resolution is pure: the same set always yields an equivalent
    privilege, and nothing is retained when it fails.
    """

    def __init__(
        self,
        catalog: PrivilegeCatalog,
        classifier: Optional[ActionClassifier] = None,
    ):
        self.catalog = catalog
        self.engine = catalog.engine
        self.classifier = classifier or ActionClassifier(catalog)

    def resolve(self, tokens: Iterable[str]) -> Privilege:
        names = frozenset(normalize(token) for token in tokens)
        if not names:
            raise InvalidArgumentError("empty set should not be used")

        literal_patterns: Set[str] = set()
        privileges: List[Privilege] = []
        unknown: Set[str] = set()

        for name in names:
            if self.classifier.is_literal_action(name):
                literal_patterns.add(self.classifier.to_matchable_pattern(name))
                continue
            privilege = self.catalog.lookup(name)
            if privilege is None:
                unknown.add(name)
            elif len(names) == 1:
                return privilege
            else:
                privileges.append(privilege)

        if unknown:
            raise UnknownPrivilegeError(names, self.catalog.valid_names(), unknown)

        automata = [p.automaton for p in privileges if p.automaton is not None]
        if literal_patterns:
            automata.append(self.engine.compile(literal_patterns))

        automaton = self.engine.union(automata)
        return Privilege(names, automaton, self.engine.as_predicate(automaton))
