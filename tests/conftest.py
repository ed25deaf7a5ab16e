"""
Pytest configuration for storefront backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("LLM_PROVIDER", "gateway")
os.environ.setdefault("AI_GATEWAY_URL", "https://gateway.test/v1/chat/completions")
os.environ.setdefault("AI_GATEWAY_API_KEY", "test-gateway-key")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

TEST_USER_ID = "test-user-id"


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def mock_auth():
    """Override both auth dependencies with a signed-in test user."""
    from storefront.auth.dependencies import (
        AuthenticatedUser,
        get_authenticated_user,
        get_optional_user,
    )
    from storefront.main import app

    async def _user():
        return AuthenticatedUser(user_id=TEST_USER_ID, access_token="test-access-token")

    app.dependency_overrides[get_authenticated_user] = _user
    app.dependency_overrides[get_optional_user] = _user
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def catalog():
    """A small catalog: two products per category, best rated first."""
    return {
        "electronics": [
            {"id": "e-1", "name": "Noise Cancelling Headphones", "price": 8999, "rating": 4.8,
             "rating_count": 2311, "image_url": "https://img.test/e1.jpg",
             "description": "Over-ear ANC headphones", "category": "electronics", "in_stock": True},
            {"id": "e-2", "name": "4K Action Camera", "price": 15999, "rating": 4.1,
             "rating_count": 842, "image_url": "https://img.test/e2.jpg",
             "description": "Waterproof action camera", "category": "electronics", "in_stock": True},
        ],
        "accessories": [
            {"id": "a-1", "name": "USB-C Hub 7-in-1", "price": 1999, "rating": 4.5,
             "rating_count": 3120, "image_url": "https://img.test/a1.jpg",
             "description": "HDMI, USB-A and SD card reader", "category": "accessories", "in_stock": False},
        ],
        "smart home": [
            {"id": "s-1", "name": "Smart Bulb (Colour)", "price": 799, "rating": 4.6,
             "rating_count": 5210, "image_url": "https://img.test/s1.jpg",
             "description": "Wi-Fi RGB bulb", "category": "smart home", "in_stock": True},
        ],
    }
