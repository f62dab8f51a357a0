"""
Tracking of server-side objects created during ingestion.
"""

import logging
from typing import List, Tuple
from urllib.parse import quote

from .exceptions import GatewayError, ReleaseFailed, RemoteOperationError
from .gateway import GatewayClient, expect_field


class ResourceTracker:
    """Records remote object names in creation order so they can be deleted."""

    def __init__(self, gateway: GatewayClient, logger: logging.Logger):
        """Initialize the resource tracker."""
        self.gateway = gateway
        self.logger = logger
        self._names: List[str] = []

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._names)

    def track(self, name: str) -> None:
        if name in self._names:
            self.logger.warning(f"Resource '{name}' is already tracked")
        self._names.append(name)
        self.logger.info(f"Tracking resource '{name}'")

    async def release_all(self) -> List[ReleaseFailed]:
        """Delete every tracked object, in creation order.

        A failed deletion is logged and collected, never re-raised, so the
        remaining objects are still released. Nothing is retried and the
        tracked set is left untouched; call ``clear()`` afterwards.
        """
        failures: List[ReleaseFailed] = []

        for name in list(self._names):
            try:
                response = await self.gateway.call(f"/objects/{quote(name, safe='')}", {}, "DELETE")
                expect_field(response)
                self.logger.info(f"Released resource '{name}'")
            except (GatewayError, RemoteOperationError) as e:
                failure = ReleaseFailed(
                    f"Failed to release resource '{name}': {e.message}",
                    name,
                    error_code=e.error_code,
                    details=e.details
                )
                self.logger.error(failure.message)
                failures.append(failure)

        return failures

    def clear(self) -> None:
        self._names.clear()
