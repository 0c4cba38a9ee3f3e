"""Status matrix: which branches hold which status keys."""

from typing import Dict, Iterable, List, Set


class StatusMatrix:
    """Mapping from status key to the set of branch names holding it."""

    def __init__(self, keys: Iterable[str] = ()):
        self._members: Dict[str, Set[str]] = {key: set() for key in keys}

    def add(self, key: str, branch: str) -> None:
        self._members.setdefault(key, set()).add(branch)

    def discard(self, key: str, branch: str) -> None:
        if key in self._members:
            self._members[key].discard(branch)

    def holds(self, key: str, branch: str) -> bool:
        return branch in self._members.get(key, ())

    def members(self, key: str) -> Set[str]:
        """Branches holding a key (a copy, safe to mutate)."""
        return set(self._members.get(key, ()))

    def keys(self) -> List[str]:
        return list(self._members)

    def statuses_of(self, branch: str, order: Iterable[str]) -> List[str]:
        """Keys held by a branch, in the given order."""
        return [key for key in order if self.holds(key, branch)]

    def remove_matching(self, key: str, predicate) -> Set[str]:
        """Remove every member of a key for which predicate(name) is true."""
        removed = {name for name in self._members.get(key, ()) if predicate(name)}
        if removed:
            self._members[key] -= removed
        return removed

    def to_dict(self) -> Dict[str, List[str]]:
        """JSON friendly view with sorted member lists."""
        return {key: sorted(names) for key, names in self._members.items()}

    def __contains__(self, key: str) -> bool:
        return key in self._members

    def __repr__(self) -> str:
        held = {key: sorted(names) for key, names in self._members.items() if names}
        return f"StatusMatrix({held})"
