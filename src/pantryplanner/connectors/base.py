"""Base interfaces for external recipe sources."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pantryplanner.models import PantryItem
from pantryplanner.schemas import GeneratedMealPlanEntry


@dataclass
class ConnectorResponse:
    """Standardized response from connector API calls."""

    data: Any
    status_code: int
    headers: dict[str, str]


class ConnectorError(Exception):
    """Raised when an upstream API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class RecipeProvider(ABC):
    """A source of recipe suggestions outside the user's own catalog."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return provider name, used as the provenance of its entries."""
        pass

    @abstractmethod
    async def generate_entries(
        self, count: int, pantry: Sequence[PantryItem]
    ) -> list[GeneratedMealPlanEntry]:
        """
        Suggest up to ``count`` meals, preferring ones that use the pantry.

        Args:
            count: Maximum number of entries to return.
            pantry: The user's pantry snapshot, foods loaded.

        Returns:
            Suggested entries tagged with this provider's name.

        Raises:
            ExternalSourceUnavailableError: The upstream source failed.
        """
        pass

    async def close(self) -> None:
        """Release any network resources."""
        return None
