"""Pytest configuration and fixtures for all tests."""

from pathlib import Path

import pytest

from swixter.core.profiles import ProfileStore
from swixter.core.registry import ProviderRegistry
from swixter.core.user_providers import UserProviderStore


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Main config file inside a not-yet-created directory."""
    return tmp_path / "swixter" / "config.json"


@pytest.fixture
def user_store(config_path: Path) -> UserProviderStore:
    return UserProviderStore(lambda: config_path)


@pytest.fixture
def registry(user_store: UserProviderStore) -> ProviderRegistry:
    return ProviderRegistry(user_store)


@pytest.fixture
def profile_store(config_path: Path) -> ProfileStore:
    return ProfileStore(lambda: config_path)


@pytest.fixture
def foo_provider() -> dict:
    return {
        "id": "foo",
        "name": "Foo",
        "displayName": "Foo",
        "baseURL": "https://x.test",
        "authType": "bearer",
        "defaultModels": ["m1"],
    }


@pytest.fixture
def work_profile() -> dict:
    return {
        "name": "work",
        "providerId": "anthropic",
        "apiKey": "sk-1",
        "model": "claude-3-5-sonnet-20241022",
    }
