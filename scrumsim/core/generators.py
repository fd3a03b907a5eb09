"""
Generators for the initial state of a run.

Builds the team roster, the synthetic backlog and the empty sprint windows.
Draw order matters: callers must invoke these in team, backlog, sprints order
against the run's single random source.
"""

import math
from datetime import datetime, timedelta
from typing import List

from scrumsim.core.random_source import RandomSource
from scrumsim.models.entities import (
    Complexity,
    Priority,
    Sprint,
    TeamMember,
    TeamRole,
    UserStory,
)

ROLE_CYCLE = [
    TeamRole.DEVELOPER,
    TeamRole.DEVELOPER,
    TeamRole.DEVELOPER,
    TeamRole.SCRUM_MASTER,
    TeamRole.PRODUCT_OWNER,
    TeamRole.QA_ENGINEER,
]

SKILL_VOCABULARY = [
    "JavaScript",
    "React",
    "Node.js",
    "Python",
    "Java",
    "SQL",
    "AWS",
    "Docker",
    "Testing",
    "Agile",
]

STORY_TEMPLATES = [
    "Implement user authentication system",
    "Create dashboard for data visualization",
    "Add payment processing functionality",
    "Implement real-time notifications",
    "Create admin panel for user management",
    "Add search functionality with filters",
    "Implement file upload and storage",
    "Create reporting system",
    "Add multi-language support",
    "Implement API rate limiting",
]

# Cumulative upper bounds
COMPLEXITY_TABLE = [
    (Complexity.SIMPLE, 0.4),
    (Complexity.MEDIUM, 0.8),
    (Complexity.COMPLEX, 1.0),
]

PRIORITY_TABLE = [
    (Priority.HIGH, 0.3),
    (Priority.MEDIUM, 0.7),
    (Priority.LOW, 1.0),
]

BASE_POINTS = {
    Complexity.SIMPLE: 2,
    Complexity.MEDIUM: 5,
    Complexity.COMPLEX: 8,
}

MIN_EXPERIENCE = 0.5


def round_half_up(value: float) -> int:
    """Round .5 upwards instead of to the nearest even integer."""
    return math.floor(value + 0.5)


def generate_team(rng: RandomSource, size: int, avg_experience: float) -> List[TeamMember]:
    """
    Build ``size`` team members around an average experience.

    Experience varies by up to two years either way (floored at half a
    year), availability sits between 70% and 90%, and roles follow a fixed
    cycle of three developers, a scrum master, a product owner and a QA
    engineer.
    """
    team = []
    for i in range(size):
        experience = max(MIN_EXPERIENCE, avg_experience + (rng.next() - 0.5) * 4)
        availability = 0.8 + (rng.next() - 0.5) * 0.2
        team.append(
            TeamMember(
                id=f"member-{i}",
                name=f"Team Member {i + 1}",
                role=ROLE_CYCLE[i % len(ROLE_CYCLE)],
                experience=experience,
                availability=availability,
                skills=generate_skills(rng, experience),
            )
        )
    return team


def generate_skills(rng: RandomSource, experience: float) -> List[str]:
    """Sample skills with replacement; duplicates are dropped."""
    target = math.floor(experience * 2) + 2
    skills: List[str] = []
    for _ in range(min(target, len(SKILL_VOCABULARY))):
        skill = rng.pick(SKILL_VOCABULARY)
        if skill not in skills:
            skills.append(skill)
    return skills


def generate_backlog(
    rng: RandomSource,
    count: int,
    technical_debt_level: float,
) -> List[UserStory]:
    """
    Build ``count`` synthetic stories.

    Titles cycle through a fixed template list, so they repeat once the
    count exceeds the number of templates.
    """
    stories = []
    for i in range(count):
        complexity = rng.pick_threshold(COMPLEXITY_TABLE)
        story_points = max(1, round_half_up(BASE_POINTS[complexity] + (rng.next() - 0.5) * 2))
        technical_debt = technical_debt_level * rng.next()
        business_value = 1 + math.floor(rng.next() * 10)
        priority = rng.pick_threshold(PRIORITY_TABLE)

        title = STORY_TEMPLATES[i % len(STORY_TEMPLATES)]
        stories.append(
            UserStory(
                id=f"story-{i}",
                title=title,
                description=f"Detailed description for {title}",
                priority=priority,
                story_points=story_points,
                complexity=complexity,
                technical_debt=technical_debt,
                business_value=business_value,
            )
        )
    return stories


def generate_sprints(count: int, duration: int, start_date: datetime) -> List[Sprint]:
    """Contiguous, non-overlapping sprint windows starting at ``start_date``."""
    sprints = []
    days_per_sprint = duration * 7
    for i in range(count):
        sprint_start = start_date + timedelta(days=i * days_per_sprint)
        sprints.append(
            Sprint(
                id=f"sprint-{i}",
                name=f"Sprint {i + 1}",
                start_date=sprint_start,
                end_date=sprint_start + timedelta(days=days_per_sprint - 1),
                duration=duration,
            )
        )
    return sprints
