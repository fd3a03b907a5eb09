"""
Metrics aggregation.

Seeds the running metrics at the start of a run, folds each closed sprint
into them, and computes the derived scores once the run is over.
"""

from dataclasses import dataclass
from typing import List

from scrumsim.core.events import MAX_SCORE, MIN_SCORE, clamp
from scrumsim.models.entities import (
    SimulationConfig,
    SimulationMetrics,
    SimulationState,
    Sprint,
    SprintStatus,
    StoryStatus,
    TeamMember,
    average_experience,
)

BASE_MORALE = 7.0
BASE_QUALITY = 8.0
BASELINE_EXPERIENCE = 3.0
MORALE_REWARD = 0.2
MORALE_PENALTY = 0.3
SPRINT_SLIP_PENALTY = 20.0


@dataclass
class SprintOutcome:
    """What a sprint actually delivered against its plan."""

    sprint_id: str
    planned_velocity: float
    actual_velocity: int
    completed_stories: int
    total_stories: int
    success_rate: float
    met_commitment: bool


class MetricsAggregator:
    """Owns every rule that updates ``SimulationMetrics``."""

    def initial_metrics(self, config: SimulationConfig, team: List[TeamMember]) -> SimulationMetrics:
        avg_experience = average_experience(team)
        return SimulationMetrics(
            total_stories_completed=0,
            average_velocity=float(config.initial_velocity),
            sprint_success_rate=0.0,
            technical_debt_score=clamp(10 - config.technical_debt_level, 0.0, 10.0),
            team_morale=clamp(
                BASE_MORALE + (avg_experience - BASELINE_EXPERIENCE) * 0.5,
                MIN_SCORE,
                MAX_SCORE,
            ),
            stakeholder_satisfaction=5.0,
            timeline_accuracy=100.0,
            quality_score=clamp(
                BASE_QUALITY - config.technical_debt_level * 0.3,
                MIN_SCORE,
                MAX_SCORE,
            ),
        )

    def close_sprint(self, metrics: SimulationMetrics, sprint: Sprint) -> SprintOutcome:
        """
        Fold a finished sprint into the running metrics and mark it completed.

        Unfinished stories keep their status and stay with the sprint.
        """
        done = sprint.stories_with_status(StoryStatus.DONE)
        actual_velocity = sum(story.story_points for story in done)
        total = len(sprint.stories)
        success_rate = len(done) / total * 100 if total else 0.0

        metrics.average_velocity = (metrics.average_velocity + actual_velocity) / 2
        metrics.sprint_success_rate = success_rate

        met_commitment = actual_velocity >= sprint.velocity
        if met_commitment:
            metrics.team_morale = min(MAX_SCORE, metrics.team_morale + MORALE_REWARD)
        else:
            metrics.team_morale = max(MIN_SCORE, metrics.team_morale - MORALE_PENALTY)

        sprint.status = SprintStatus.COMPLETED

        return SprintOutcome(
            sprint_id=sprint.id,
            planned_velocity=sprint.velocity,
            actual_velocity=actual_velocity,
            completed_stories=len(done),
            total_stories=total,
            success_rate=success_rate,
            met_commitment=met_commitment,
        )

    def timeline_accuracy(self, state: SimulationState) -> float:
        slipped = abs(state.config.sprint_count - len(state.completed_sprints()))
        return max(0.0, 100 - slipped * SPRINT_SLIP_PENALTY)

    def quality_score(self, state: SimulationState) -> float:
        return clamp(
            state.metrics.quality_score
            - state.config.technical_debt_level * 0.1
            + average_experience(state.team) * 0.1,
            MIN_SCORE,
            MAX_SCORE,
        )

    def stakeholder_satisfaction(self, state: SimulationState) -> float:
        metrics = state.metrics
        initial_velocity = state.config.initial_velocity
        velocity_factor = metrics.average_velocity / initial_velocity if initial_velocity else 0.0
        quality_factor = metrics.quality_score / 10
        timeline_factor = metrics.timeline_accuracy / 100
        return clamp(
            (velocity_factor + quality_factor + timeline_factor) / 3 * 10,
            MIN_SCORE,
            MAX_SCORE,
        )

    def finalize(self, state: SimulationState) -> SimulationMetrics:
        """Compute the end-of-run scores; order matters since each feeds the next."""
        metrics = state.metrics
        metrics.timeline_accuracy = self.timeline_accuracy(state)
        metrics.quality_score = self.quality_score(state)
        metrics.stakeholder_satisfaction = self.stakeholder_satisfaction(state)
        return metrics
