"""Fixtures for listing repository and endpoint tests."""

from unittest.mock import MagicMock

import pytest

from modules.listings.repository import ListingRepository


@pytest.fixture
def dynamodb_item_factory():
    """Build typed DynamoDB scan items.

    Example:
        item = dynamodb_item_factory(id="1", price="450000")
    """

    def _factory(id="1", title="Maruti Swift VXI", price="450000", mileage="21.5", **extra):
        item = {
            "id": {"S": id},
            "title": {"S": title},
            "price": {"N": price},
            "mileage": {"N": mileage},
            "fuel_type": {"S": "Petrol"},
            "year": {"N": "2019"},
        }
        item.update(extra)
        return item

    return _factory


@pytest.fixture
def mock_dynamodb_client():
    """DynamoDB client whose scan paginator yields ``client.pages``."""
    client = MagicMock()
    client.pages = []
    paginator = MagicMock()
    paginator.paginate.side_effect = lambda **kwargs: iter(client.pages)
    client.get_paginator.return_value = paginator
    return client


@pytest.fixture
def repository(mock_dynamodb_client):
    return ListingRepository(mock_dynamodb_client, "car-listings")
