# git_providers/source_control/providers/base_api.py

"""
Base class for per-kind backend APIs.

Every operation defaults to raising UnsupportedOperationError, so a backend
class only implements what its provider can actually do.
"""

import logging
from typing import Any

from ...core.context import OperationContext
from ...core.exceptions import UnsupportedOperationError
from ..pagination import ListOptions, Page


class BaseResourceAPI:
    """Raw server access for one resource kind; see ``api.ResourceAPI``."""

    provider_type = "unknown"
    kind = "resource"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            f"{self.provider_type} does not support {operation} for {self.kind}",
            details={"provider": self.provider_type, "kind": self.kind},
        )

    async def fetch_one(self, ref: Any, ctx: OperationContext) -> Any:
        raise self._unsupported("get")

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[Any], Page]:
        raise self._unsupported("list")

    async def create_one(self, ref: Any, obj: Any, ctx: OperationContext) -> Any:
        raise self._unsupported("create")

    async def update_one(self, ref: Any, obj: Any, ctx: OperationContext) -> Any:
        raise self._unsupported("update")

    async def delete_one(self, ref: Any, ctx: OperationContext) -> None:
        raise self._unsupported("delete")
