from abc import ABC, abstractmethod
from dataclasses import dataclass

from carenav.core.resolution.schemas import IssueInput, ResolutionMap


@dataclass(frozen=True)
class GeneratedResolution:
    """A resolution map plus the name of the strategy that actually built it."""

    resolution_map: ResolutionMap
    generator: str


class ResolutionGenerator(ABC):
    """Turns an ``IssueInput`` into a complete ``ResolutionMap``.

    Implementations are interchangeable: every one of them either returns a
    full map or raises ``UnknownCategoryError`` for an unsupported category.
    ``generate`` is a coroutine even where the work is synchronous so that
    callers can swap a remote strategy in without changes.
    """

    name: str = "base"

    @abstractmethod
    async def generate(self, issue: IssueInput) -> ResolutionMap:
        ...

    async def generate_with_source(self, issue: IssueInput) -> GeneratedResolution:
        """Like ``generate``, also reporting which strategy produced the map.

        Strategies that delegate to a fallback override this so the stored
        row names the fallback rather than themselves.
        """
        return GeneratedResolution(await self.generate(issue), self.name)
