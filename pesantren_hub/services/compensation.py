"""
services/compensation.py
------------------------
Undo actions for orchestrated writes.

Store writes of one operation share a single transaction and roll back
together. Calls to the identity provider cannot join that transaction, so
each such step registers an undo action here. If the block fails, the undo
actions run in reverse order and the original exception propagates.
"""

from typing import Awaitable, Callable

from pesantren_hub.core.logging import get_logger

logger = get_logger(__name__)


class CompensationStack:

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self._actions: list[tuple[str, Callable[[], Awaitable[None]]]] = []

    def push(self, description: str, action: Callable[[], Awaitable[None]]) -> None:
        self._actions.append((description, action))

    async def __aenter__(self) -> "CompensationStack":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            logger.warning(
                "Orchestrated write failed, compensating",
                operation=self.operation,
                error=str(exc),
                steps=len(self._actions),
            )
            await self.unwind()
        self._actions.clear()
        return False

    async def unwind(self) -> None:
        while self._actions:
            description, action = self._actions.pop()
            try:
                await action()
                logger.info("Compensation applied", operation=self.operation, step=description)
            except Exception as exc:
                # Keep unwinding; the caller still sees the original failure.
                logger.error(
                    "Compensation failed",
                    operation=self.operation,
                    step=description,
                    error=str(exc),
                    exc_info=True,
                )
