"""
Sprint planning.

Selects a capacity-bounded subset of the remaining backlog for the sprint
about to start.
"""

from dataclasses import dataclass, field, replace
from typing import List

import structlog

from scrumsim.models.entities import (
    Priority,
    Sprint,
    StoryStatus,
    TeamMember,
    UserStory,
)

logger = structlog.get_logger(__name__)

PRIORITY_WEIGHT = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}

HOURS_PER_WEEK = 40


@dataclass
class PlanningResult:
    """Outcome of planning a single sprint."""

    sprint_id: str
    budget: float
    selected_ids: List[str] = field(default_factory=list)
    committed_points: int = 0
    deferred_count: int = 0


def story_rank(story: UserStory) -> int:
    return PRIORITY_WEIGHT[story.priority] + story.business_value


def team_capacity(team: List[TeamMember], sprint_duration: int) -> float:
    """Available member-hours for a sprint of ``sprint_duration`` weeks."""
    return sum(member.availability * HOURS_PER_WEEK * sprint_duration for member in team)


class SprintPlanner:
    """
    Greedy priority/value planner.

    The budget is the team's running average velocity at the moment of
    planning. Items that do not fit stay in the backlog for a later sprint;
    nothing is split.
    """

    def plan(
        self,
        sprint: Sprint,
        backlog: List[UserStory],
        team: List[TeamMember],
        budget: float,
        sprint_duration: int,
    ) -> PlanningResult:
        available = [story for story in backlog if story.status == StoryStatus.BACKLOG]
        # sorted() is stable, so equal ranks keep backlog order
        ranked = sorted(available, key=story_rank, reverse=True)

        result = PlanningResult(sprint_id=sprint.id, budget=budget)
        remaining = budget
        selected: List[UserStory] = []

        for story in ranked:
            if remaining >= story.story_points:
                story.status = StoryStatus.SPRINT_BACKLOG
                selected.append(replace(story, dependencies=list(story.dependencies)))
                remaining -= story.story_points
                result.selected_ids.append(story.id)
                result.committed_points += story.story_points
            else:
                result.deferred_count += 1

        sprint.stories = selected
        sprint.capacity = team_capacity(team, sprint_duration)
        sprint.velocity = budget

        logger.debug(
            "sprint_planned",
            sprint_id=sprint.id,
            budget=round(budget, 2),
            committed_points=result.committed_points,
            selected=len(result.selected_ids),
            deferred=result.deferred_count,
        )
        return result
