"""
Builders and a scripted random source shared by the unit tests.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from scrumsim.core.random_source import RandomSource
from scrumsim.models.entities import (
    Complexity,
    Priority,
    SimulationConfig,
    SimulationMetrics,
    SimulationState,
    Sprint,
    StoryStatus,
    TeamMember,
    TeamRole,
    UserStory,
)

START = datetime(2024, 1, 1)


class ScriptedRandom(RandomSource):
    """Random source that replays a fixed list of draws and fails when it runs dry."""

    def __init__(self, values: Iterable[float]):
        super().__init__(seed=1)
        self._values: List[float] = list(values)

    def next(self) -> float:
        if not self._values:
            raise AssertionError("Scripted random source exhausted")
        self.draws += 1
        return self._values.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._values)


def make_story(
    story_id: str,
    points: int = 3,
    priority: Priority = Priority.MEDIUM,
    business_value: int = 5,
    complexity: Complexity = Complexity.MEDIUM,
    status: StoryStatus = StoryStatus.BACKLOG,
) -> UserStory:
    return UserStory(
        id=story_id,
        title=f"Story {story_id}",
        description=f"Detailed description for Story {story_id}",
        priority=priority,
        story_points=points,
        complexity=complexity,
        technical_debt=0.0,
        business_value=business_value,
        status=status,
    )


def make_member(index: int, availability: float = 0.8, experience: float = 3.0) -> TeamMember:
    return TeamMember(
        id=f"member-{index}",
        name=f"Team Member {index + 1}",
        role=TeamRole.DEVELOPER,
        experience=experience,
        availability=availability,
        skills=["Python"],
    )


def make_sprint(stories: Optional[List[UserStory]] = None, velocity: float = 10.0) -> Sprint:
    return Sprint(
        id="sprint-0",
        name="Sprint 1",
        start_date=START,
        end_date=datetime(2024, 1, 7),
        duration=1,
        velocity=velocity,
        stories=stories or [],
    )


def make_state(
    team_size: int = 4,
    sprints: Optional[List[Sprint]] = None,
    average_velocity: float = 20.0,
    team_morale: float = 7.0,
) -> SimulationState:
    return SimulationState(
        config=SimulationConfig(team_size=team_size, sprint_count=1, sprint_duration=1),
        team=[make_member(i) for i in range(team_size)],
        stories=[],
        sprints=sprints or [make_sprint()],
        metrics=SimulationMetrics(average_velocity=average_velocity, team_morale=team_morale),
    )
