from __future__ import annotations

import re
from functools import total_ordering
from typing import Iterable, List, Optional, Tuple, Union

WILDCARD = "+"

_NUMERIC = re.compile(r"^\d+$")
_QUALIFIER = re.compile(r"^[A-Za-z0-9.\-]+$")


@total_ordering
class TokenizedVersion:
    """A dotted version such as 8.0.21 or 1.8.0_45.

    Up to three numeric components, optionally followed by an underscore
    qualifier. Candidate versions may use '+' as a wildcard in the last
    position given (8.0.+, 8.+, 1.8.0_+).
    """

    def __init__(self, version: str, *, allow_wildcards: bool = True):
        if not version:
            raise ValueError("Invalid version '': must not be empty")

        self.raw = version
        numeric, sep, qualifier = version.partition("_")
        parts = numeric.split(".")

        if len(parts) > 3 or any(p == "" for p in parts):
            raise ValueError(f"Invalid version '{version}': must have at most 3 numeric components")
        if sep and len(parts) != 3:
            raise ValueError(f"Invalid version '{version}': a qualifier requires 3 numeric components")
        if sep and not qualifier:
            raise ValueError(f"Invalid version '{version}': empty qualifier")

        tokens: List[Union[int, str]] = []
        for p in parts:
            if p == WILDCARD:
                tokens.append(WILDCARD)
            elif _NUMERIC.match(p):
                tokens.append(int(p))
            else:
                raise ValueError(f"Invalid version '{version}': '{p}' is not numeric")

        if qualifier and qualifier != WILDCARD and not _QUALIFIER.match(qualifier):
            raise ValueError(f"Invalid version '{version}': bad qualifier '{qualifier}'")

        trailing = [*tokens, qualifier] if qualifier else list(tokens)
        if WILDCARD in trailing[:-1]:
            raise ValueError(f"Invalid version '{version}': a wildcard must be the last component")
        if not allow_wildcards and WILDCARD in trailing:
            raise ValueError(f"Invalid version '{version}': wildcards are not allowed")

        self._tokens = tokens
        self.qualifier = qualifier

    @property
    def major(self):
        return self._tokens[0]

    @property
    def minor(self):
        return self._tokens[1] if len(self._tokens) > 1 else None

    @property
    def micro(self):
        return self._tokens[2] if len(self._tokens) > 2 else None

    @property
    def has_wildcards(self) -> bool:
        return WILDCARD in self._tokens or self.qualifier == WILDCARD

    def check_size(self, size: int) -> None:
        if len(self._tokens) != size:
            raise ValueError(f"Invalid version '{self.raw}': must have exactly {size} numeric components")

    def matches(self, other: "TokenizedVersion") -> bool:
        """True if the concrete version other satisfies this candidate."""

        mine = [*self._tokens, self.qualifier]
        theirs = [*other._tokens, other.qualifier]
        for i, token in enumerate(mine):
            if token == WILDCARD:
                return True
            if i >= len(theirs) or theirs[i] != token:
                return False
        return len(theirs) == len(mine)

    def _key(self) -> Tuple:
        if self.has_wildcards:
            raise ValueError(f"Cannot order wildcard version '{self.raw}'")
        padded = [*self._tokens, *([-1] * (3 - len(self._tokens)))]
        return (*padded, self.qualifier)

    def __eq__(self, other):
        if not isinstance(other, TokenizedVersion):
            return NotImplemented
        return self._tokens == other._tokens and self.qualifier == other.qualifier

    def __lt__(self, other):
        if not isinstance(other, TokenizedVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash((tuple(self._tokens), self.qualifier))

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"TokenizedVersion({self.raw!r})"


def resolve_version(
    candidate: Union[str, TokenizedVersion],
    versions: Iterable[str],
) -> Optional[TokenizedVersion]:
    """Return the highest of versions satisfying candidate, or None."""

    wanted = candidate if isinstance(candidate, TokenizedVersion) else TokenizedVersion(str(candidate))
    matching = [
        v
        for v in (TokenizedVersion(str(raw), allow_wildcards=False) for raw in versions)
        if wanted.matches(v)
    ]
    return max(matching) if matching else None
