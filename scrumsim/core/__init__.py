"""
Core package.

Contains the simulation engine and its building blocks: the random source,
generators, planner, day executor, event models and metrics aggregator.
"""

from scrumsim.core.engine import (
    SimulationEngine,
    run,
)
from scrumsim.core.executor import DayExecutor
from scrumsim.core.metrics import MetricsAggregator, SprintOutcome
from scrumsim.core.planner import PlanningResult, SprintPlanner
from scrumsim.core.random_source import RandomSource

__all__ = [
    # Engine
    "SimulationEngine",
    "run",
    # Building blocks
    "DayExecutor",
    "MetricsAggregator",
    "SprintOutcome",
    "PlanningResult",
    "SprintPlanner",
    "RandomSource",
]
