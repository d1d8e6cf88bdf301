# src/oidc_authorizer/cli.py

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Sequence

from .domain.entities import DecisionDocument
from .domain.exceptions import ConfigurationError
from .integrations.common.authorizer_factory import create_authorizer


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="oidc-authorizer",
        description="Evaluate a stored API Gateway authorizer event and print the decision",
    )

    parser.add_argument(
        "event",
        nargs="?",
        default="-",
        help="Path to the event JSON file (default: read stdin).",
    )
    parser.add_argument(
        "--jwks-uri",
        help="JWKS endpoint (default from env AUTHORIZER_JWKS_URI).",
    )
    parser.add_argument(
        "--issuer",
        help="Accepted token issuer (default from env AUTHORIZER_ACCEPTED_ISSUER).",
    )
    parser.add_argument(
        "--audiences",
        "-A",
        nargs="*",
        help="Accepted audiences (default from env AUTHORIZER_ACCEPTED_AUDIENCES).",
    )
    parser.add_argument(
        "--algorithms",
        nargs="*",
        help="Accepted signing algorithms (default from env AUTHORIZER_SIGNING_ALGORITHMS or RS256).",
    )
    parser.add_argument(
        "--scopes",
        "-S",
        nargs="*",
        help="Accepted scopes; a token needs at least one of them to be allowed.",
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--methods",
        "-M",
        nargs="+",
        help="HTTP methods the decision applies to.",
    )
    mode.add_argument(
        "--path-mapping",
        "-P",
        help='JSON object mapping methods to path lists, e.g. \'{"GET": ["orders/*"]}\'.',
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for the authorizer loggers.",
    )

    return parser.parse_args(args=argv)


def _read_event(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as fh:
        return json.load(fh)


async def _run(args: argparse.Namespace) -> Any:
    path_mapping = json.loads(args.path_mapping) if args.path_mapping else None
    if path_mapping is not None and not isinstance(path_mapping, dict):
        raise ConfigurationError("--path-mapping must be a JSON object")

    authorizer = create_authorizer(
        jwks_uri=args.jwks_uri,
        jwt_issuer=args.issuer,
        jwt_audiences=args.audiences,
        jwt_signing_algorithms=args.algorithms,
        accepted_scopes=args.scopes,
        methods_applied=args.methods,
        path_mapping=path_mapping,
    )
    return await authorizer.authorize(_read_event(args.event))


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr)

    result = asyncio.run(_run(args))
    if isinstance(result, DecisionDocument):
        json.dump(result.to_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    json.dump({"error": result}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 1


if __name__ == "__main__":
    sys.exit(main())
