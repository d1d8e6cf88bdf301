from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence, Union

from ...domain.constants import Effect, POLICY_VERSION
from ...domain.entities import DecisionDocument
from ...domain.exceptions import (
    MissingEffectError,
    MissingPrincipalIdError,
    MissingResourceError,
)
from .generate_statements import generate_statements


def build_policy(
        principal_id: Optional[str],
        effect: Union[Effect, str, None],
        resource: Optional[str],
        methods_applied: Optional[Iterable[str]] = None,
        path_mapping: Optional[Mapping[str, Sequence[str]]] = None,
) -> DecisionDocument:
    """
    Wrap generated statements into the document returned to the gateway.

    Raises:
        MissingPrincipalIdError
        MissingEffectError
        MissingResourceError
    """
    if not principal_id:
        raise MissingPrincipalIdError("Missing principalId to generate policy")
    if not effect:
        raise MissingEffectError("Missing effect to generate policy")
    if not resource:
        raise MissingResourceError("Missing resource to generate policy")

    statements = generate_statements(effect, resource, methods_applied, path_mapping)
    return DecisionDocument(
        principal_id=principal_id,
        statements=tuple(statements),
        version=POLICY_VERSION,
    )
