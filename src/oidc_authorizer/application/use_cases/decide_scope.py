from __future__ import annotations

from typing import Iterable

from ...domain.constants import Effect


def decide_scope(granted_scopes: Iterable[str], accepted_scopes: Iterable[str]) -> Effect:
    """
    Allow iff at least one granted scope is also accepted.

    An empty accepted list therefore always denies.
    """
    accepted = set(accepted_scopes)
    if any(scope in accepted for scope in granted_scopes):
        return Effect.ALLOW
    return Effect.DENY
