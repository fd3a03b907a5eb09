"""
Results reporting.

Derives chart-ready series and summaries from a finished run: planned vs
actual velocity, the flattened burndown, story status counts and event
tallies.
"""

from collections import Counter
from typing import Dict, List, Optional

from scrumsim.models.entities import SimulationState, StoryStatus
from scrumsim.models.schemas import (
    BurndownSeriesPoint,
    EventSummary,
    SimulationMetricsSchema,
    SimulationSummary,
    VelocityPoint,
)


def velocity_series(state: SimulationState) -> List[VelocityPoint]:
    """Planned vs actual velocity for every sprint."""
    return [
        VelocityPoint(
            sprint=sprint.name,
            planned_velocity=sprint.velocity,
            actual_velocity=sprint.completed_points(),
            completed_stories=len(sprint.stories_with_status(StoryStatus.DONE)),
            total_stories=len(sprint.stories),
        )
        for sprint in state.sprints
    ]


def burndown_series(state: SimulationState) -> List[BurndownSeriesPoint]:
    series = []
    for sprint in state.sprints:
        for point in sprint.burndown_data:
            series.append(
                BurndownSeriesPoint(
                    sprint=sprint.name,
                    day=(point.date - sprint.start_date).days,
                    date=point.date,
                    remaining_points=point.remaining_points,
                    remaining_hours=point.remaining_hours,
                )
            )
    return series


def effective_story_statuses(state: SimulationState) -> Dict[str, StoryStatus]:
    """
    Latest known status of every backlog item.

    Sprints work on copies of the backlog, so a planned story's status is
    taken from the last sprint that carried it.
    """
    statuses = {story.id: story.status for story in state.stories}
    for sprint in state.sprints:
        for story in sprint.stories:
            statuses[story.id] = story.status
    return statuses


def story_status_breakdown(state: SimulationState) -> Dict[str, int]:
    counts = Counter(status.value for status in effective_story_statuses(state).values())
    return dict(counts)


def event_summary(state: SimulationState) -> EventSummary:
    by_type = Counter(event.type.value for event in state.events)
    by_severity = Counter(
        impediment.severity.value
        for sprint in state.sprints
        for impediment in sprint.impediments
    )
    return EventSummary(
        events_by_type=dict(by_type),
        impediments_by_severity=dict(by_severity),
        total_events=sum(by_type.values()),
        total_impediments=sum(by_severity.values()),
    )


def build_summary(state: SimulationState, seed: Optional[int] = None) -> SimulationSummary:
    return SimulationSummary(
        seed=seed,
        metrics=SimulationMetricsSchema.model_validate(state.metrics),
        velocity=velocity_series(state),
        burndown=burndown_series(state),
        story_status=story_status_breakdown(state),
        events=event_summary(state),
    )
