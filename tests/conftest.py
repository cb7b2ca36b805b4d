"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides testing settings, sample specifications and compiled modules.
"""

from types import ModuleType
from unittest.mock import patch

import pytest
from pydantic_settings import SettingsConfigDict

from a2mlgen.config import settings as settings_module
from a2mlgen.config.settings import Settings
from a2mlgen.core.compiler import a2ml_specification

from tests.data.sample_specifications import (
    A2ML_TEST_SPECIFICATION,
    NESTED_SPECIFICATION,
    REPEATED_BLOCK_SPECIFICATION,
    SIMPLE_STRUCT_SPECIFICATION,
)


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="A2MLGEN_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(scope="session", autouse=True)
def override_settings(test_settings: TestSettings):
    """Override compiler settings for testing."""
    with patch.object(settings_module, "settings", test_settings):
        yield test_settings


@pytest.fixture
def settings_factory():
    """Install settings with the given overrides for the duration of a test."""
    patches = []

    def _install(**overrides) -> Settings:
        custom = TestSettings(**overrides)
        patcher = patch.object(settings_module, "settings", custom)
        patcher.start()
        patches.append(patcher)
        return custom

    yield _install

    for patcher in reversed(patches):
        patcher.stop()


@pytest.fixture(scope="session")
def simple_module(override_settings) -> ModuleType:
    """Generated module of the single struct block specification."""
    return a2ml_specification(SIMPLE_STRUCT_SPECIFICATION)


@pytest.fixture(scope="session")
def a2ml_test_module(override_settings) -> ModuleType:
    """Generated module covering every item kind."""
    return a2ml_specification(A2ML_TEST_SPECIFICATION)


@pytest.fixture(scope="session")
def nested_module(override_settings) -> ModuleType:
    """Generated module with named top-level types."""
    return a2ml_specification(NESTED_SPECIFICATION)


@pytest.fixture(scope="session")
def repeated_module(override_settings) -> ModuleType:
    """Generated module with repeated blocks and tag-only entries."""
    return a2ml_specification(REPEATED_BLOCK_SPECIFICATION)
