"""One-time readiness gate for dashboard initialization."""

import asyncio
import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

DASHBOARD_MODULES = ("analytics-api", "analytics-utils", "analytics-renderers")


class ReadinessBarrier:
    """Completes once every named module has reported ready.

    The barrier never resets: once open, :meth:`wait` returns immediately.
    """

    def __init__(self, modules: Iterable[str] = DASHBOARD_MODULES):
        self.modules = tuple(modules)
        self._pending = set(self.modules)
        self._event = asyncio.Event()
        if not self._pending:
            self._event.set()

    @property
    def is_ready(self) -> bool:
        return self._event.is_set()

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._pending)

    def mark_ready(self, module: str) -> None:
        if module not in self.modules:
            logger.warning("Unknown module reported ready: %s", module)
            return
        self._pending.discard(module)
        if not self._pending:
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()
