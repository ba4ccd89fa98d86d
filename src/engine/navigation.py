"""Navigation targets for `navigate` actions."""

from typing import Awaitable, Protocol

from core import get_logger

logger = get_logger(__name__)


class Navigator(Protocol):
    """Host capability that moves the user to another address."""

    def navigate(self, url: str) -> None | Awaitable[None]:
        """Navigate to `url` (may be a coroutine function)."""
        ...


class RecordingNavigator:
    """Navigator that only records requested addresses (headless hosts, tests)."""

    def __init__(self) -> None:
        self.history: list[str] = []

    def navigate(self, url: str) -> None:
        logger.info("navigate", url=url)
        self.history.append(url)

    @property
    def location(self) -> str | None:
        """Last requested address."""
        return self.history[-1] if self.history else None


__all__ = ["Navigator", "RecordingNavigator"]
