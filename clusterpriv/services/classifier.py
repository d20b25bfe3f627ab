"""Telling literal cluster actions apart from privilege names."""

from clusterpriv.services.catalog import PrivilegeCatalog


def normalize(token: str) -> str:
    """Tokens compare case-insensitively."""
    return token.lower()


def action_to_pattern(action: str) -> str:
    """Widen a literal action so it also matches its own sub-actions.

    ``cluster:monitor/state`` becomes ``cluster:monitor/state*`` and so also
    grants ``cluster:monitor/state[n]``. Patterns that already end with a
    wildcard are left alone.
    """
    if action.endswith("*"):
        return action
    return action + "*"


class ActionClassifier:
    """Classifies normalized tokens against the catalog's ``all`` grant."""

    def __init__(self, catalog: PrivilegeCatalog):
        self._action_matcher = catalog.all().predicate

    def is_literal_action(self, token: str) -> bool:
        """True if the token already names something inside the cluster action space."""
        return self._action_matcher(token)

    def to_matchable_pattern(self, token: str) -> str:
        return action_to_pattern(token)
