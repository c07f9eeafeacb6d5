"""Shared FastAPI dependencies."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Header

from pantryplanner.plan.external import ExternalSourceOrchestrator, build_providers


async def get_user_id(x_user_id: Annotated[int, Header()]) -> int:
    """Identify the caller from the ``X-User-Id`` header."""
    return x_user_id


async def get_orchestrator() -> AsyncIterator[ExternalSourceOrchestrator]:
    """Build the configured external providers for one request."""
    providers = build_providers()
    try:
        yield ExternalSourceOrchestrator(providers)
    finally:
        for provider in providers:
            await provider.close()
