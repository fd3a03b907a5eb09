"""
Event and impediment models.

Probability tables and narrative text for the random things that happen
during a sprint, and the rules for how their impact lands on the running
metrics.
"""

from datetime import datetime
from typing import Dict

from scrumsim.core.random_source import RandomSource
from scrumsim.models.entities import (
    EventImpact,
    EventType,
    Impediment,
    ImpedimentSeverity,
    SimulationEvent,
    SimulationMetrics,
    UserStory,
)

DAILY_EVENT_CHANCE = 0.10
DAILY_IMPEDIMENT_CHANCE = 0.05

RANDOM_EVENT_TYPES = [
    EventType.IMPEDIMENT_CREATED,
    EventType.VELOCITY_CHANGE,
    EventType.SCOPE_CHANGE,
]

EVENT_DESCRIPTIONS: Dict[EventType, str] = {
    EventType.IMPEDIMENT_CREATED: "A new impediment has been identified",
    EventType.VELOCITY_CHANGE: "Team velocity has changed due to various factors",
    EventType.SCOPE_CHANGE: "Project scope has been modified",
}

IMPEDIMENT_DESCRIPTIONS = [
    "Technical infrastructure issues",
    "Team member unavailability",
    "External dependency delays",
    "Requirements clarification needed",
    "Environment setup problems",
]

# Cumulative upper bounds
SEVERITY_TABLE = [
    (ImpedimentSeverity.LOW, 0.5),
    (ImpedimentSeverity.MEDIUM, 0.8),
    (ImpedimentSeverity.HIGH, 0.95),
    (ImpedimentSeverity.CRITICAL, 1.0),
]

SEVERITY_VELOCITY_PENALTY = {
    ImpedimentSeverity.LOW: -0.05,
    ImpedimentSeverity.MEDIUM: -0.10,
    ImpedimentSeverity.HIGH: -0.20,
    ImpedimentSeverity.CRITICAL: -0.30,
}

STORY_COMPLETED_IMPACT = EventImpact(velocity=0.1, morale=0.05)

MIN_SCORE = 1.0
MAX_SCORE = 10.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def roll_event_impact(rng: RandomSource, event_type: EventType) -> EventImpact:
    """
    Build the impact vector for a randomly rolled event.

    Both random deltas are drawn on every call, velocity first, so the
    stream advances the same way whichever category was rolled.
    """
    velocity_delta = (rng.next() - 0.5) * 0.2
    timeline_delta = (rng.next() - 0.5) * 0.3

    if event_type == EventType.IMPEDIMENT_CREATED:
        return EventImpact(velocity=-0.1, morale=-0.05)
    if event_type == EventType.VELOCITY_CHANGE:
        return EventImpact(velocity=velocity_delta)
    if event_type == EventType.SCOPE_CHANGE:
        return EventImpact(timeline=timeline_delta)
    return EventImpact()


def roll_daily_event(
    rng: RandomSource,
    event_id: str,
    timestamp: datetime,
):
    """Roll for the day's random event; returns ``None`` on a quiet day."""
    if not rng.chance(DAILY_EVENT_CHANCE):
        return None

    event_type = rng.pick(RANDOM_EVENT_TYPES)
    return SimulationEvent(
        id=event_id,
        type=event_type,
        timestamp=timestamp,
        description=EVENT_DESCRIPTIONS.get(event_type, "An event occurred"),
        impact=roll_event_impact(rng, event_type),
    )


def story_completed_event(
    story: UserStory,
    event_id: str,
    timestamp: datetime,
) -> SimulationEvent:
    return SimulationEvent(
        id=event_id,
        type=EventType.STORY_COMPLETED,
        timestamp=timestamp,
        description=f'Story "{story.title}" completed',
        impact=EventImpact(
            velocity=STORY_COMPLETED_IMPACT.velocity,
            morale=STORY_COMPLETED_IMPACT.morale,
        ),
    )


def apply_impact(metrics: SimulationMetrics, impact: EventImpact) -> None:
    """
    Apply an event's impact to the running metrics.

    Velocity is multiplicative, morale and quality are additive and clamped
    to the 1-10 scale. Timeline deltas are informational only.
    """
    if impact.velocity:
        metrics.average_velocity *= 1 + impact.velocity
    if impact.morale:
        metrics.team_morale = clamp(metrics.team_morale + impact.morale, MIN_SCORE, MAX_SCORE)
    if impact.quality:
        metrics.quality_score = clamp(metrics.quality_score + impact.quality, MIN_SCORE, MAX_SCORE)


def roll_impediment(
    rng: RandomSource,
    impediment_id: str,
    timestamp: datetime,
):
    """Roll for a new impediment; returns ``None`` when nothing blocks the team."""
    if not rng.chance(DAILY_IMPEDIMENT_CHANCE):
        return None

    description = rng.pick(IMPEDIMENT_DESCRIPTIONS)
    severity = rng.pick_threshold(SEVERITY_TABLE)
    return Impediment(
        id=impediment_id,
        description=description,
        severity=severity,
        created_at=timestamp,
    )


def apply_impediment(metrics: SimulationMetrics, impediment: Impediment) -> float:
    """Scale average velocity by the severity penalty; returns the penalty."""
    penalty = SEVERITY_VELOCITY_PENALTY[impediment.severity]
    metrics.average_velocity *= 1 + penalty
    return penalty
