"""Fill meal plans from external recipe sources."""

from collections.abc import Callable, Sequence

from pantryplanner.config import Settings, get_settings
from pantryplanner.connectors.base import ConnectorError, RecipeProvider
from pantryplanner.connectors.mealdb import MealDBConnector, MealDBRecipeProvider
from pantryplanner.errors import ExternalSourceUnavailableError
from pantryplanner.logging_config import get_logger
from pantryplanner.models import PantryItem
from pantryplanner.schemas import GeneratedMealPlanEntry

logger = get_logger(__name__)


def _mealdb(settings: Settings) -> RecipeProvider:
    return MealDBRecipeProvider(
        MealDBConnector(
            api_key=settings.mealdb_api_key,
            base_url=settings.mealdb_url,
            timeout=settings.mealdb_timeout,
        )
    )


PROVIDER_FACTORIES: dict[str, Callable[[Settings], RecipeProvider]] = {
    "mealdb": _mealdb,
}


def build_providers(settings: Settings | None = None) -> list[RecipeProvider]:
    """Instantiate the configured providers in their configured order."""
    settings = settings or get_settings()
    providers = []
    for name in settings.external_providers:
        factory = PROVIDER_FACTORIES.get(name)
        if factory is None:
            raise ValueError(
                f"Unknown external recipe provider '{name}'. "
                f"Known providers: {', '.join(sorted(PROVIDER_FACTORIES))}"
            )
        providers.append(factory(settings))
    return providers


class ExternalSourceOrchestrator:
    """Asks each provider in turn for meals until the quota is met."""

    def __init__(self, providers: Sequence[RecipeProvider]):
        self.providers = list(providers)

    async def fill_remaining(
        self, remaining: int, pantry: Sequence[PantryItem]
    ) -> list[GeneratedMealPlanEntry]:
        """
        Collect up to ``remaining`` entries from the providers.

        Providers are called in order and only while the quota is unmet. A
        provider that fails aborts the whole fill with
        :class:`ExternalSourceUnavailableError`; a provider that simply returns
        fewer entries hands the rest of the quota to the next one.
        """
        entries: list[GeneratedMealPlanEntry] = []

        for provider in self.providers:
            if remaining <= 0:
                break

            logger.info(f"Calling external recipe provider {provider.name} for {remaining} meals")
            try:
                generated = await provider.generate_entries(remaining, pantry)
            except ExternalSourceUnavailableError as e:
                logger.warning(f"Provider {provider.name} unavailable: {e}")
                raise
            except ConnectorError as e:
                logger.warning(f"Provider {provider.name} unavailable: {e}")
                raise ExternalSourceUnavailableError(
                    f"External recipe source '{provider.name}' is unavailable",
                    source=provider.name,
                ) from e
            except Exception as e:
                logger.error(f"Provider {provider.name} failed unexpectedly: {e!r}")
                raise ExternalSourceUnavailableError(
                    f"External recipe source '{provider.name}' failed",
                    source=provider.name,
                ) from e

            # Providers may return more than asked for
            generated = generated[:remaining]
            entries.extend(generated)
            remaining -= len(generated)

        if remaining > 0:
            logger.info(f"External providers exhausted with {remaining} meals unfilled")

        return entries
