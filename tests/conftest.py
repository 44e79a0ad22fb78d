"""Shared fixtures for LifeTracker tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.lifetracker import const
from custom_components.lifetracker.const import (
    CONF_DEFAULT_DIFFICULTY,
    DEFAULT_DIFFICULTY,
    DOMAIN,
    LIFETRACKER_TITLE,
)
from custom_components.lifetracker.coordinator import LifeTrackerCoordinator
from custom_components.lifetracker.store import LifeTrackerStore

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

# 2024-03-10 12:00 UTC is still 2024-03-10 in the test zone (US/Pacific)
FROZEN_NOW = "2024-03-10 12:00:00"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=LIFETRACKER_TITLE,
        data={CONF_DEFAULT_DIFFICULTY: DEFAULT_DIFFICULTY},
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return an empty storage document."""
    return LifeTrackerStore.get_default_structure()


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    freezer: Any,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the LifeTracker integration with mocked storage at a fixed time."""
    freezer.move_to(FROZEN_NOW)
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> LifeTrackerCoordinator:
    """Return the coordinator of the set-up entry."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]
