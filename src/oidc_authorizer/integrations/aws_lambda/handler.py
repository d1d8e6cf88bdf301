from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Mapping, Optional

from ..common.authorizer_factory import Authorizer, create_authorizer
from ...config.settings import AuthorizerSettings
from ...domain.constants import UNAUTHORIZED
from ...domain.entities import DecisionDocument

LambdaHandler = Callable[[Mapping[str, Any], Any], Dict[str, Any]]


def create_lambda_handler(
        settings: Optional[AuthorizerSettings] = None,
        *,
        authorizer: Optional[Authorizer] = None,
        **overrides: Any,
) -> LambdaHandler:
    """
    Build an API Gateway Lambda authorizer handler.

    Configuration is resolved here, once, at import/cold-start time, so a
    bad configuration fails the deployment instead of every request.

    The returned handler gives back the policy as a dict, or raises
    ``Exception("Unauthorized")`` which API Gateway turns into a 401.
    """
    authorizer = authorizer or create_authorizer(settings, **overrides)

    def handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
        result = asyncio.run(authorizer.authorize(event, context))
        if not isinstance(result, DecisionDocument):
            raise Exception(UNAUTHORIZED)
        return result.to_dict()

    return handler


"""

# handler.py deployed as the authorizer function

from oidc_authorizer.integrations.aws_lambda import create_lambda_handler

lambda_handler = create_lambda_handler(
    path_mapping={"GET": ["orders", "orders/*"], "POST": ["orders"]},
    accepted_scopes=["write:orders"],
)

"""
