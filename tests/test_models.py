"""Tests for model defaults."""

import pytest

from pantryplanner.models import MealPlan, User, utcnow


def test_utcnow_is_timezone_aware():
    assert utcnow().utcoffset().total_seconds() == 0


@pytest.mark.asyncio
async def test_created_at_defaults_to_aware_utc(db_session):
    user = User(email="carol@example.com")
    db_session.add(user)
    await db_session.flush()
    plan = MealPlan(user_id=user.id)
    db_session.add(plan)
    await db_session.commit()

    assert user.created_at.tzinfo is not None
    assert plan.created_at.tzinfo is not None
