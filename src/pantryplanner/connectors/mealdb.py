"""TheMealDB API connector and recipe provider."""

import asyncio
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pantryplanner.config import get_settings
from pantryplanner.connectors.base import ConnectorError, ConnectorResponse, RecipeProvider
from pantryplanner.errors import ExternalSourceUnavailableError
from pantryplanner.logging_config import get_logger
from pantryplanner.models import PantryItem
from pantryplanner.schemas import GeneratedMealPlanEntry

logger = get_logger(__name__)


@dataclass
class MealIngredient:
    """Parsed ingredient from a meal."""

    name: str
    measure: str


@dataclass
class ParsedMeal:
    """Structured meal data parsed from API response."""

    id: str
    name: str
    instructions: str
    thumbnail: str | None
    source_url: str | None
    ingredients: list[MealIngredient]

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "ParsedMeal":
        """Parse meal from TheMealDB API response format."""
        # strIngredient1-20 pair up with strMeasure1-20
        ingredients = []
        for i in range(1, 21):
            ingredient = data.get(f"strIngredient{i}")
            measure = data.get(f"strMeasure{i}")
            if ingredient and ingredient.strip():
                ingredients.append(
                    MealIngredient(name=ingredient.strip(), measure=(measure or "").strip())
                )

        return cls(
            id=data.get("idMeal", ""),
            name=data.get("strMeal", "Unknown Meal"),
            instructions=data.get("strInstructions") or "",
            thumbnail=data.get("strMealThumb"),
            source_url=data.get("strSource"),
            ingredients=ingredients,
        )


class MealDBConnector:
    """Connector for TheMealDB API."""

    DEFAULT_TIMEOUT = 30.0
    MAX_RETRIES = 3
    BACKOFF_BASE = 1
    BACKOFF_MAX = 30
    REQUEST_DELAY = 0.1  # No documented rate limit; stay polite

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.mealdb_api_key
        self.base_url = base_url or f"{settings.mealdb_base_url}/{self.api_key}"
        self.timeout = timeout or settings.mealdb_timeout or self.DEFAULT_TIMEOUT
        self._client: httpx.AsyncClient | None = None
        self._last_request_time: float = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Accept": "application/json",
                    "User-Agent": "PantryPlanner/1.0",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _throttle(self) -> None:
        elapsed = time.monotonic() - self._last_request_time
        if elapsed < self.REQUEST_DELAY:
            await asyncio.sleep(self.REQUEST_DELAY - elapsed)
        self._last_request_time = time.monotonic()

    async def _request(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> ConnectorResponse:
        """Make an HTTP request with retry logic."""
        await self._throttle()

        url = f"{self.base_url}/{endpoint}"
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.MAX_RETRIES),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
            reraise=True,
        )
        async def _do_request() -> httpx.Response:
            return await client.get(url, params=params)

        try:
            response = await _do_request()
        except (RetryError, httpx.HTTPError) as e:
            logger.error(f"Request failed after {self.MAX_RETRIES} attempts: {url}: {e}")
            raise ConnectorError(
                f"Request to {endpoint} failed after {self.MAX_RETRIES} attempts",
                response=str(e),
            ) from e

        if response.status_code >= 400:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"API error {response.status_code} for {url}: {error_detail}")
            raise ConnectorError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json() if response.text else {}
        except ValueError as e:
            logger.warning(f"Failed to parse JSON response: {e}")
            data = {}

        return ConnectorResponse(
            data=data,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

    async def get_meal_by_id(self, meal_id: str) -> ParsedMeal | None:
        """
        Get full meal details by ID.

        Args:
            meal_id: The meal ID.

        Returns:
            Parsed meal or None if not found.
        """
        logger.debug(f"Fetching meal by ID: {meal_id}")
        response = await self._request("lookup.php", params={"i": meal_id})

        meals_data = response.data.get("meals") or []
        if not meals_data:
            return None
        return ParsedMeal.from_api_response(meals_data[0])

    async def get_random_meal(self) -> ParsedMeal | None:
        """Get a random meal."""
        logger.debug("Fetching random meal")
        response = await self._request("random.php")

        meals_data = response.data.get("meals") or []
        if not meals_data:
            return None
        return ParsedMeal.from_api_response(meals_data[0])

    async def filter_by_ingredient(self, ingredient: str) -> list[dict[str, Any]]:
        """
        Filter meals by main ingredient.

        Note: This returns summary data only (idMeal, strMeal, strMealThumb).
        Use get_meal_by_id for full details.
        """
        # The API expects underscores in multi-word ingredient names
        query = "_".join(ingredient.lower().split())
        logger.info(f"Filtering meals by ingredient: {query}")
        response = await self._request("filter.php", params={"i": query})

        meals = response.data.get("meals") or []
        logger.info(f"Found {len(meals)} meals with '{query}'")
        return meals


class MealDBRecipeProvider(RecipeProvider):
    """Suggests TheMealDB meals built around what is in the pantry."""

    # Random lookups allowed per missing meal before giving up on duplicates
    RANDOM_ATTEMPTS_PER_MEAL = 3

    def __init__(self, connector: MealDBConnector | None = None):
        self.connector = connector or MealDBConnector()

    @property
    def name(self) -> str:
        return "mealdb"

    async def generate_entries(
        self, count: int, pantry: Sequence[PantryItem]
    ) -> list[GeneratedMealPlanEntry]:
        entries: list[GeneratedMealPlanEntry] = []
        seen: set[str] = set()

        try:
            for food_name in self._pantry_food_names(pantry):
                if len(entries) >= count:
                    break
                for summary in await self.connector.filter_by_ingredient(food_name):
                    if len(entries) >= count:
                        break
                    meal_id = summary.get("idMeal")
                    if not meal_id or meal_id in seen:
                        continue
                    seen.add(meal_id)
                    meal = await self.connector.get_meal_by_id(meal_id)
                    if meal is not None:
                        entries.append(self._to_entry(meal))

            attempts = 0
            max_attempts = (count - len(entries)) * self.RANDOM_ATTEMPTS_PER_MEAL
            while len(entries) < count and attempts < max_attempts:
                attempts += 1
                meal = await self.connector.get_random_meal()
                if meal is None or meal.id in seen:
                    continue
                seen.add(meal.id)
                entries.append(self._to_entry(meal))
        except ConnectorError as e:
            raise ExternalSourceUnavailableError(
                f"TheMealDB is unavailable: {e}", source=self.name
            ) from e

        logger.info(f"TheMealDB suggested {len(entries)} of {count} requested meals")
        return entries

    async def close(self) -> None:
        await self.connector.close()

    @staticmethod
    def _pantry_food_names(pantry: Sequence[PantryItem]) -> list[str]:
        names: list[str] = []
        for item in pantry:
            if item.food is None:
                continue
            name = item.food.name.strip()
            if name and name.lower() not in (n.lower() for n in names):
                names.append(name)
        return names

    def _to_entry(self, meal: ParsedMeal) -> GeneratedMealPlanEntry:
        return GeneratedMealPlanEntry(
            source=self.name,
            external_id=meal.id,
            title=meal.name,
            instructions=meal.instructions,
            source_url=meal.source_url,
            thumbnail=meal.thumbnail,
            ingredients=[ing.name for ing in meal.ingredients],
        )
