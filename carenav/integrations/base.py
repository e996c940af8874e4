from abc import ABC, abstractmethod

from carenav.common.logging import get_logger


class BaseIntegration(ABC):
    """Common base for clients of services outside this process.

    Subclasses report which backend they are using through ``mode`` (for
    example ``"mock"`` or ``"live"``) and implement ``health_check`` so the
    ``/health`` endpoint can report on every integration.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"integrations.{name}")

    @property
    @abstractmethod
    def mode(self) -> str:
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True when the integration is usable."""
        ...

    async def status(self) -> dict[str, str | bool]:
        healthy = await self.health_check()
        return {"name": self.name, "mode": self.mode, "healthy": healthy}
