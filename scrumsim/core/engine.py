"""
Simulation Engine - runs a complete Scrum delivery simulation.

This module provides:
1. Initial state generation (team, backlog, sprint windows)
2. Per-sprint planning, daily execution and sprint close
3. Final metric derivation
4. Decision recording for training mode

A run is synchronous and single-threaded. Every stochastic choice draws from
the engine's own random source, so the same config, seed and start date
reproduce an identical state.
"""

from datetime import date, datetime, time
from typing import List, Optional

import structlog

from scrumsim.core.executor import DayExecutor
from scrumsim.core.generators import generate_backlog, generate_sprints, generate_team
from scrumsim.core.metrics import MetricsAggregator, SprintOutcome
from scrumsim.core.planner import PlanningResult, SprintPlanner
from scrumsim.core.random_source import RandomSource, Seed
from scrumsim.models.entities import (
    Decision,
    SimulationConfig,
    SimulationState,
    Sprint,
    SprintStatus,
)

logger = structlog.get_logger(__name__)


def default_start_date() -> datetime:
    """Midnight today, so runs made on the same day line up exactly."""
    return datetime.combine(date.today(), time.min)


class SimulationEngine:
    """
    Core engine for Scrum delivery simulations.

    Manages:
    - Generation of the initial team, backlog and sprints
    - Sprint planning against the running average velocity
    - Daily execution (events, work, burndown, impediments)
    - Metric aggregation and finalization
    """

    def __init__(
        self,
        config: SimulationConfig,
        seed: Optional[Seed] = None,
        start_date: Optional[datetime] = None,
        planner: Optional[SprintPlanner] = None,
        aggregator: Optional[MetricsAggregator] = None,
    ):
        """
        Initialize the engine and generate the starting state.

        Args:
            config: Simulation parameters for this run
            seed: Seed for the random source; a fresh one is drawn when omitted
            start_date: First day of sprint 1 (defaults to today at midnight)
            planner: Optional sprint planner override
            aggregator: Optional metrics aggregator override
        """
        self.rng = RandomSource(seed)
        self.start_date = start_date or default_start_date()
        self.planner = planner or SprintPlanner()
        self.aggregator = aggregator or MetricsAggregator()

        self.planning_results: List[PlanningResult] = []
        self.sprint_outcomes: List[SprintOutcome] = []

        self.state = self._initialize(config)
        self.executor = DayExecutor(self.rng, self.state)

    @property
    def seed(self) -> Seed:
        return self.rng.seed

    def _initialize(self, config: SimulationConfig) -> SimulationState:
        team = generate_team(self.rng, config.team_size, config.team_experience)
        stories = generate_backlog(self.rng, config.story_count, config.technical_debt_level)
        sprints = generate_sprints(config.sprint_count, config.sprint_duration, self.start_date)

        return SimulationState(
            config=config,
            team=team,
            stories=stories,
            sprints=sprints,
            metrics=self.aggregator.initial_metrics(config, team),
            seed=self.seed,
        )

    def run_simulation(self) -> SimulationState:
        """
        Run every sprint to completion and finalize the metrics.

        Returns:
            The fully populated simulation state
        """
        logger.info(
            "simulation_started",
            seed=self.seed,
            team_size=self.state.config.team_size,
            sprint_count=self.state.config.sprint_count,
            story_count=self.state.config.story_count,
        )

        for index, sprint in enumerate(self.state.sprints):
            self.state.current_sprint = index
            self.run_sprint(sprint)

        self.aggregator.finalize(self.state)

        metrics = self.state.metrics
        logger.info(
            "simulation_finished",
            seed=self.seed,
            stories_completed=metrics.total_stories_completed,
            average_velocity=round(metrics.average_velocity, 2),
            stakeholder_satisfaction=round(metrics.stakeholder_satisfaction, 2),
            events=len(self.state.events),
            random_draws=self.rng.draws,
        )
        return self.state

    def run_sprint(self, sprint: Sprint) -> SprintOutcome:
        """Plan, execute and close a single sprint."""
        sprint.status = SprintStatus.ACTIVE

        planning = self.planner.plan(
            sprint,
            self.state.stories,
            self.state.team,
            budget=self.state.metrics.average_velocity,
            sprint_duration=self.state.config.sprint_duration,
        )
        self.planning_results.append(planning)

        for day in range(sprint.working_days):
            self.state.current_day = day
            self.executor.execute_day(sprint, day)

        outcome = self.aggregator.close_sprint(self.state.metrics, sprint)
        self.sprint_outcomes.append(outcome)

        logger.debug(
            "sprint_completed",
            sprint_id=sprint.id,
            planned_velocity=round(outcome.planned_velocity, 2),
            actual_velocity=outcome.actual_velocity,
            success_rate=round(outcome.success_rate, 1),
            impediments=len(sprint.impediments),
        )
        return outcome

    def make_decision(self, decision_point_id: str, option_id: str) -> Decision:
        """
        Record a training decision.

        Decisions are stored for later review only; they do not change any
        simulated outcome. The timestamp is the simulated day the run is on.
        """
        decision = Decision(
            id=f"decision-{len(self.state.decisions)}",
            scenario_id="current",
            decision_point_id=decision_point_id,
            selected_option=option_id,
            timestamp=self.simulated_now(),
        )
        self.state.decisions.append(decision)
        return decision

    def simulated_now(self) -> datetime:
        """Timestamp of the sprint day the run cursor points at."""
        sprints = self.state.sprints
        if not sprints:
            return self.start_date
        sprint = sprints[self.state.current_sprint]
        return self.executor.day_timestamp(sprint, self.state.current_day)

    def get_state(self) -> SimulationState:
        return self.state


def run(
    config: SimulationConfig,
    seed: Optional[Seed] = None,
    start_date: Optional[datetime] = None,
) -> SimulationState:
    """Run a simulation on a fresh engine and return its final state."""
    return SimulationEngine(config, seed=seed, start_date=start_date).run_simulation()
