"""
Services package.

Contains the simulation service and results reporting.
"""

from scrumsim.services.report import (
    build_summary,
    burndown_series,
    event_summary,
    story_status_breakdown,
    velocity_series,
)
from scrumsim.services.simulation_service import SimulationService

__all__ = [
    "SimulationService",
    "build_summary",
    "burndown_series",
    "event_summary",
    "story_status_breakdown",
    "velocity_series",
]
