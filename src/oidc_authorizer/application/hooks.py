"""
Default hooks, exposed so callers can wrap or compose them.

A principal resolver is called as ``resolver(settings, claims)`` and a
post-processor as ``post_processor(context)``; both may be plain functions
or coroutines.
"""

from __future__ import annotations

import inspect
from typing import Any, Optional

from ..domain.constants import DEFAULT_PRINCIPAL_ID
from ..domain.entities import DecisionDocument, DecodedClaims, PostProcessContext


def default_principal_resolver(settings: Any = None, claims: Optional[DecodedClaims] = None) -> str:
    return DEFAULT_PRINCIPAL_ID


def subject_principal_resolver(settings: Any, claims: DecodedClaims) -> Optional[str]:
    """Use the token `sub` claim as principal id."""
    return claims.subject


async def default_post_processor(context: PostProcessContext) -> DecisionDocument:
    return context.policy


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
