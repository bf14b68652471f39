"""Pytest configuration and fixtures."""

import pytest


@pytest.fixture
def api_key():
    """Test API key."""
    return "test_api_key_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_api_secret_789012"


@pytest.fixture
def sample_balances_response():
    """Sample balances response body."""
    return '{"status":"ok","balances":{"BTC":"1.5"}}'


@pytest.fixture
def sample_prices_response():
    """Sample latest prices response body."""
    return (
        '{"status":"ok","prices":{'
        '"btc":{"bid":"45000.00","ask":"45100.00","last":"45050.00"},'
        '"ltc":{"bid":"90.10","ask":"90.90","last":"90.50"}}}'
    )
