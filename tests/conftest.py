"""Fixtures for the test suite."""

import pytest

from klaviyo_client.backends.klaviyo import KlaviyoBackend


@pytest.fixture(name="klaviyo_backend")
def fixture_klaviyo_backend():
    """Generate a Klaviyo backend with a test API key."""
    return KlaviyoBackend(api_key="test-api-key")
