from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Union

from ...domain.constants import Effect
from ...domain.entities import Statement
from ...domain.exceptions import (
    MissingEffectError,
    MissingResourceError,
    PolicyGenerationError,
)
from ...domain.value_objects import METHOD_SEGMENT, PATH_SEGMENT, ResourceArn

# apiId/stage/METHOD/<one path segment>. Anything deeper in the incoming ARN
# is dropped in unmapped mode (see DESIGN.md).
UNMAPPED_SEGMENT_LIMIT = 4
# apiId/stage/METHOD, the mapped path is written after it verbatim
MAPPED_SEGMENT_LIMIT = 3


def _coerce_effect(effect: Union[Effect, str]) -> Effect:
    try:
        return Effect(effect)
    except ValueError as exc:
        raise PolicyGenerationError(f"Unsupported effect {effect!r}") from exc


def _working_segments(arn: ResourceArn, limit: int, size: int) -> List[str]:
    segments = list(arn.segments[:limit])
    # short resource paths get empty slots, matching how they re-join
    while len(segments) < size:
        segments.append("")
    return segments


def statements_without_mapping(
        methods_applied: Iterable[str],
        effect: Effect,
        arn: ResourceArn,
) -> List[Statement]:
    """Two statements per method: the resource itself and everything below it."""
    statements: List[Statement] = []
    segments = _working_segments(arn, UNMAPPED_SEGMENT_LIMIT, METHOD_SEGMENT + 1)
    for method in methods_applied:
        segments[METHOD_SEGMENT] = method.upper()
        resource = str(arn.with_segments(tuple(segments)))
        statements.append(Statement(effect=effect, resource=resource))
        statements.append(Statement(effect=effect, resource=f"{resource}/*"))
    return statements


def statements_with_mapping(
        path_mapping: Mapping[str, Sequence[str]],
        effect: Effect,
        arn: ResourceArn,
) -> List[Statement]:
    """One statement per (method, path) pair, in mapping then list order."""
    statements: List[Statement] = []
    segments = _working_segments(arn, MAPPED_SEGMENT_LIMIT, PATH_SEGMENT + 1)
    for method, routes in path_mapping.items():
        for route in routes:
            segments[METHOD_SEGMENT] = method.upper()
            segments[PATH_SEGMENT] = route
            resource = str(arn.with_segments(tuple(segments)))
            statements.append(Statement(effect=effect, resource=resource))
    return statements


def generate_statements(
        effect: Union[Effect, str, None],
        resource: Optional[str],
        methods_applied: Optional[Iterable[str]] = None,
        path_mapping: Optional[Mapping[str, Sequence[str]]] = None,
) -> List[Statement]:
    """
    Expand an effect and the called method ARN into policy statements.

    Without a path mapping every applied method yields the rewritten ARN and
    the same ARN with `/*`. With a mapping every mapped path yields exactly
    one statement and wildcards must be spelled out in the path itself.

    Raises:
        MissingEffectError
        MissingResourceError
        MalformedResourceError
    """
    if not effect:
        raise MissingEffectError("Missing effect to generate policy statements")
    if not resource:
        raise MissingResourceError("Missing resource to generate policy statements")

    effect = _coerce_effect(effect)
    arn = ResourceArn.parse(resource)

    if not path_mapping:
        return statements_without_mapping(methods_applied or (), effect, arn)
    return statements_with_mapping(path_mapping, effect, arn)
