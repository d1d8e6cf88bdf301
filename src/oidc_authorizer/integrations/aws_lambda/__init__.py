from __future__ import annotations

from .handler import create_lambda_handler

__all__ = ["create_lambda_handler"]
