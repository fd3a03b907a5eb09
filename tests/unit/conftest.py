"""
Shared fixtures for unit tests.
"""

from datetime import datetime

import pytest

from scrumsim.models.entities import SimulationConfig
from tests.unit.helpers import START


@pytest.fixture
def start_date() -> datetime:
    return START


@pytest.fixture
def small_config() -> SimulationConfig:
    """The one-sprint reference scenario."""
    return SimulationConfig(
        team_size=5,
        sprint_count=1,
        sprint_duration=1,
        initial_velocity=20,
        story_count=5,
        technical_debt_level=0,
        team_experience=3,
    )


@pytest.fixture
def default_config() -> SimulationConfig:
    return SimulationConfig()
