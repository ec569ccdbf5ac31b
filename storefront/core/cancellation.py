"""Cooperative cancellation for checkout requests.

A CancellationToken is created by the request-handling layer and passed
explicitly through the call chain. Core services check it at entry and
again after every suspension point before performing a write.
"""

import asyncio


class CancellationToken:
    """Signal that a caller has abandoned the request."""

    def __init__(self, cancelled: bool = False):
        """Initialize the token.

        Args:
            cancelled: Create the token already in the cancelled state.
        """
        self._event = asyncio.Event()
        if cancelled:
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal cancellation. Idempotent."""
        self._event.set()

    async def wait(self) -> None:
        """Suspend until cancellation is signalled."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"
