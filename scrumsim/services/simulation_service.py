"""
Simulation service layer.

Provides business logic for running simulations: single runs with recorded
decisions, and batches of independent runs over several seeds.
"""

import statistics
import time
from datetime import datetime
from typing import Dict, List, Optional

import structlog
from prometheus_client import Counter, Histogram

from scrumsim.config import Settings, get_settings
from scrumsim.core.engine import SimulationEngine
from scrumsim.models.entities import SimulationConfig, SimulationState
from scrumsim.models.schemas import (
    BatchSummary,
    MetricStats,
    SimulationRunRequest,
    SimulationSummary,
    SimulationSummaryRequest,
)
from scrumsim.services.report import build_summary

logger = structlog.get_logger(__name__)

SIMULATION_RUNS = Counter(
    "simulation_runs_total",
    "Total simulation runs",
    ["mode"],
)
SIMULATION_DURATION = Histogram(
    "simulation_run_duration_seconds",
    "Wall-clock duration of a simulation run",
)

# Headline metrics aggregated across a batch
BATCH_METRICS = [
    "total_stories_completed",
    "average_velocity",
    "sprint_success_rate",
    "team_morale",
    "stakeholder_satisfaction",
    "timeline_accuracy",
    "quality_score",
]


class SimulationService:
    """
    Service for running simulations.

    Each run gets its own engine and random source; nothing is shared or
    stored between calls.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _resolve_seed(self, seed: Optional[int]) -> Optional[int]:
        if seed is not None:
            return seed
        return self.settings.simulation.default_seed

    def _resolve_start(self, start_date: Optional[datetime]) -> Optional[datetime]:
        return start_date or self.settings.simulation.start_date

    def _execute(
        self,
        config: SimulationConfig,
        seed: Optional[int],
        start_date: Optional[datetime],
        mode: str,
    ) -> SimulationEngine:
        engine = SimulationEngine(config, seed=seed, start_date=start_date)

        started = time.monotonic()
        engine.run_simulation()
        SIMULATION_DURATION.observe(time.monotonic() - started)
        SIMULATION_RUNS.labels(mode=mode).inc()

        return engine

    def run(self, request: SimulationRunRequest) -> SimulationState:
        """
        Run a single simulation.

        Args:
            request: Validated run request

        Returns:
            Final simulation state with any requested decisions recorded
        """
        engine = self._execute(
            request.config.to_config(),
            self._resolve_seed(request.seed),
            self._resolve_start(request.start_date),
            mode="single",
        )

        for decision in request.decisions:
            engine.make_decision(decision.decision_point_id, decision.option_id)

        return engine.get_state()

    def summarize(self, request: SimulationSummaryRequest) -> SimulationSummary:
        """Run a simulation and return only its summary."""
        seed = self._resolve_seed(request.seed)
        engine = self._execute(
            request.config.to_config(),
            seed,
            self._resolve_start(request.start_date),
            mode="single",
        )
        return build_summary(engine.get_state(), seed=engine.seed)

    def run_batch(
        self,
        config: SimulationConfig,
        seeds: List[int],
        start_date: Optional[datetime] = None,
    ) -> BatchSummary:
        """
        Run one independent simulation per seed.

        Args:
            config: Configuration shared by every run
            seeds: Seeds to run, one engine each
            start_date: Optional shared start date

        Returns:
            Per-seed summaries with mean/min/max of the headline metrics

        Raises:
            ValueError: If no seeds are given or there are more than allowed
        """
        max_runs = self.settings.simulation.max_batch_runs
        if not seeds:
            raise ValueError("At least one seed is required")
        if len(seeds) > max_runs:
            raise ValueError(f"Batch size {len(seeds)} exceeds the limit of {max_runs}")

        start = self._resolve_start(start_date)
        summaries = []
        for seed in seeds:
            engine = self._execute(config, seed, start, mode="batch")
            summaries.append(build_summary(engine.get_state(), seed=seed))

        stats = self._aggregate(summaries)

        logger.info(
            "batch_completed",
            runs=len(summaries),
            mean_velocity=round(stats["average_velocity"].mean, 2),
            mean_satisfaction=round(stats["stakeholder_satisfaction"].mean, 2),
        )

        return BatchSummary(runs=summaries, statistics=stats)

    def _aggregate(self, summaries: List[SimulationSummary]) -> Dict[str, MetricStats]:
        stats = {}
        for name in BATCH_METRICS:
            values = [float(getattr(s.metrics, name)) for s in summaries]
            stats[name] = MetricStats(
                mean=statistics.fmean(values),
                minimum=min(values),
                maximum=max(values),
            )
        return stats
