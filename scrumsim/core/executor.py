"""
Day-by-day sprint execution.

Each working day runs four steps in a fixed order: the random event roll,
work progress on the sprint's stories, a burndown sample, and the
impediment roll. The order is part of the reproducibility contract.
"""

import math
from datetime import datetime, timedelta
from typing import List

from scrumsim.core.events import (
    apply_impact,
    apply_impediment,
    roll_daily_event,
    roll_impediment,
    story_completed_event,
)
from scrumsim.core.random_source import RandomSource
from scrumsim.models.entities import (
    BurndownPoint,
    Complexity,
    SimulationEvent,
    SimulationState,
    Sprint,
    StoryStatus,
    UserStory,
)

BASE_COMPLETION_CHANCE = 0.3
START_CHANCE = 0.3
WIP_PER_MEMBER = 1.5
HOURS_PER_POINT = 8

COMPLEXITY_FACTOR = {
    Complexity.SIMPLE: 1.2,
    Complexity.MEDIUM: 1.0,
    Complexity.COMPLEX: 0.8,
}


class DayExecutor:
    """Advances a sprint one simulated working day at a time."""

    def __init__(self, rng: RandomSource, state: SimulationState):
        self.rng = rng
        self.state = state
        self._impediment_seq = 0

    def execute_day(self, sprint: Sprint, day: int) -> None:
        today = self.day_timestamp(sprint, day)
        self.roll_event(today)
        self.process_story_work(sprint, today)
        self.record_burndown(sprint, today)
        self.check_for_impediments(sprint, today)

    @staticmethod
    def day_timestamp(sprint: Sprint, day: int) -> datetime:
        return sprint.start_date + timedelta(days=day)

    def _next_event_id(self) -> str:
        return f"event-{len(self.state.events)}"

    def _record_event(self, event: SimulationEvent) -> None:
        self.state.events.append(event)
        apply_impact(self.state.metrics, event.impact)

    def roll_event(self, today: datetime) -> None:
        event = roll_daily_event(self.rng, self._next_event_id(), today)
        if event is not None:
            self._record_event(event)

    def completion_chance(self, story: UserStory) -> float:
        morale_factor = self.state.metrics.team_morale / 10
        return BASE_COMPLETION_CHANCE * COMPLEXITY_FACTOR[story.complexity] * morale_factor

    def max_active_stories(self) -> int:
        return math.ceil(len(self.state.team) * WIP_PER_MEMBER)

    def process_story_work(self, sprint: Sprint, today: datetime) -> List[UserStory]:
        """
        Finish and start stories for the day.

        Returns the stories completed today. Starts are capped by the number
        of stories still in progress after today's completions.
        """
        completed = []
        for story in sprint.stories_with_status(StoryStatus.IN_PROGRESS):
            if self.rng.next() < self.completion_chance(story):
                story.status = StoryStatus.DONE
                self.state.metrics.total_stories_completed += 1
                self._record_event(story_completed_event(story, self._next_event_id(), today))
                completed.append(story)

        pending = sprint.stories_with_status(StoryStatus.SPRINT_BACKLOG)
        active_count = len(sprint.stories_with_status(StoryStatus.IN_PROGRESS))
        max_active = self.max_active_stories()

        for story in pending:
            # no draw is consumed once the cap is reached
            if active_count < max_active and self.rng.chance(START_CHANCE):
                story.status = StoryStatus.IN_PROGRESS
                active_count += 1

        return completed

    def record_burndown(self, sprint: Sprint, today: datetime) -> BurndownPoint:
        remaining = sprint.remaining_points()
        point = BurndownPoint(
            date=today,
            remaining_points=remaining,
            remaining_hours=remaining * HOURS_PER_POINT,
        )
        sprint.burndown_data.append(point)
        return point

    def check_for_impediments(self, sprint: Sprint, today: datetime) -> None:
        impediment = roll_impediment(self.rng, f"impediment-{self._impediment_seq}", today)
        if impediment is None:
            return
        self._impediment_seq += 1
        sprint.impediments.append(impediment)
        apply_impediment(self.state.metrics, impediment)
