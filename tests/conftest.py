"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock

import pytest

from cookbook.client.base import CookbookClient, FetchResponse
from cookbook.dispatcher import EntityDispatcher


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def ingredient_record():
    """Ingredient record as a caller would send it."""
    return {
        "id": 11,
        "created": 1700000000000,
        "lastModified": "2024-01-01T00:00:00+00:00",
        "name": "Salt",
        "quantity": 1,
        "unit": "PINCH",
    }


@pytest.fixture
def recipe_record():
    """Recipe record with nested ingredients."""
    return {
        "created": "2024-01-01T00:00:00.000+0000",
        "lastModified": 1704067200000,
        "name": "Tomato Soup",
        "ingredients": [
            {"name": "Tomato", "quantity": 6, "unit": "UNIT"},
            {"name": "Salt", "quantity": 0.5, "unit": "SPOONS", "created": 1700000000000},
        ],
        "prepTime": 10,
        "cookTime": 25,
        "directions": ["Chop the tomatoes", "Simmer for 25 minutes", "Season"],
    }


@pytest.fixture
def recent_recipes_payload():
    """Body returned by the service for the recently added feed."""
    return [
        {"id": 7, "name": "Pancakes", "prepTime": 5, "cookTime": 10},
        {"id": 8, "name": "Omelette", "directions": ["Whisk eggs", "Fry"]},
    ]


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def mock_client():
    """Backing client with every operation mocked."""
    client = AsyncMock(spec=CookbookClient)
    client.fetch_entity.return_value = FetchResponse(
        status_code=200, body='{"id": 1, "name": "Salt"}'
    )
    client.list_recent.return_value = []
    return client


@pytest.fixture
def dispatcher(mock_client):
    """Dispatcher around the mocked client."""
    return EntityDispatcher(mock_client)
