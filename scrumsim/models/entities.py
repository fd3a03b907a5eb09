"""
Simulation entities.

Plain dataclasses for the team, backlog, sprints and the running metrics of a
single simulation run. A run owns its ``SimulationState`` exclusively; nothing
here is shared between runs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


# =============================================================================
# Enums
# =============================================================================

class TeamRole(str, Enum):
    """Roles a team member can hold."""
    DEVELOPER = "Developer"
    SCRUM_MASTER = "Scrum Master"
    PRODUCT_OWNER = "Product Owner"
    QA_ENGINEER = "QA Engineer"
    DEVOPS_ENGINEER = "DevOps Engineer"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Complexity(str, Enum):
    SIMPLE = "Simple"
    MEDIUM = "Medium"
    COMPLEX = "Complex"


class StoryStatus(str, Enum):
    """Lifecycle of a backlog item."""
    BACKLOG = "Backlog"
    SPRINT_BACKLOG = "Sprint Backlog"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    BLOCKED = "Blocked"


class SprintStatus(str, Enum):
    PLANNING = "Planning"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ImpedimentSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class ImpedimentStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class EventType(str, Enum):
    """Categories of simulation events."""
    STORY_COMPLETED = "StoryCompleted"
    IMPEDIMENT_CREATED = "ImpedimentCreated"
    VELOCITY_CHANGE = "VelocityChange"
    SCOPE_CHANGE = "ScopeChange"
    TEAM_CHANGE = "TeamChange"
    TECHNICAL_DEBT_IMPACT = "TechnicalDebtImpact"


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Input parameters for one simulation run.

    Scales (technical debt, market pressure, stakeholder engagement, tooling
    quality, process maturity) are 0-10. Bounds are the caller's job; the
    engine only guards against divisions by zero.
    """
    team_size: int = 6
    sprint_count: int = 4
    sprint_duration: int = 2  # weeks
    initial_velocity: float = 25.0
    story_count: int = 20
    technical_debt_level: float = 5.0
    team_experience: float = 4.0  # average years
    market_pressure: float = 6.0
    stakeholder_engagement: float = 7.0
    tooling_quality: float = 7.0
    process_maturity: float = 6.0


# =============================================================================
# Team and backlog
# =============================================================================

@dataclass
class TeamMember:
    """A generated team member. Immutable once the run starts."""
    id: str
    name: str
    role: TeamRole
    experience: float
    availability: float
    skills: List[str] = field(default_factory=list)


@dataclass
class UserStory:
    """
    A backlog item.

    Only ``status`` changes during a run: the planner moves it to the sprint
    backlog and the day executor moves the sprint's copy forward.
    """
    id: str
    title: str
    description: str
    priority: Priority
    story_points: int
    complexity: Complexity
    technical_debt: float
    business_value: int
    status: StoryStatus = StoryStatus.BACKLOG
    dependencies: List[str] = field(default_factory=list)


# =============================================================================
# Sprint tracking
# =============================================================================

@dataclass
class BurndownPoint:
    date: datetime
    remaining_points: int
    remaining_hours: int


@dataclass
class Impediment:
    id: str
    description: str
    severity: ImpedimentSeverity
    created_at: datetime
    status: ImpedimentStatus = ImpedimentStatus.OPEN


@dataclass
class Sprint:
    """A fixed-length iteration and everything that happened in it."""
    id: str
    name: str
    start_date: datetime
    end_date: datetime
    duration: int  # weeks
    velocity: float = 0.0
    capacity: float = 0.0
    stories: List[UserStory] = field(default_factory=list)
    status: SprintStatus = SprintStatus.PLANNING
    burndown_data: List[BurndownPoint] = field(default_factory=list)
    impediments: List[Impediment] = field(default_factory=list)

    @property
    def working_days(self) -> int:
        return self.duration * 5

    def stories_with_status(self, status: StoryStatus) -> List[UserStory]:
        return [story for story in self.stories if story.status == status]

    def total_points(self) -> int:
        return sum(story.story_points for story in self.stories)

    def completed_points(self) -> int:
        return sum(s.story_points for s in self.stories_with_status(StoryStatus.DONE))

    def remaining_points(self) -> int:
        return self.total_points() - self.completed_points()


# =============================================================================
# Events, metrics and state
# =============================================================================

@dataclass
class EventImpact:
    """Deltas an event applies; ``None`` means the dimension is untouched."""
    velocity: Optional[float] = None
    morale: Optional[float] = None
    quality: Optional[float] = None
    timeline: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        """Return only the dimensions that are set."""
        return {
            name: value
            for name, value in (
                ("velocity", self.velocity),
                ("morale", self.morale),
                ("quality", self.quality),
                ("timeline", self.timeline),
            )
            if value is not None
        }


@dataclass
class SimulationEvent:
    id: str
    type: EventType
    timestamp: datetime
    description: str
    impact: EventImpact = field(default_factory=EventImpact)


@dataclass
class SimulationMetrics:
    """Running scalar metrics, mutated throughout a run."""
    total_stories_completed: int = 0
    average_velocity: float = 0.0
    sprint_success_rate: float = 0.0
    technical_debt_score: float = 10.0
    team_morale: float = 7.0
    stakeholder_satisfaction: float = 5.0
    timeline_accuracy: float = 100.0
    quality_score: float = 8.0


@dataclass
class Decision:
    """A recorded training decision. Stored only; outcomes ignore it."""
    id: str
    scenario_id: str
    decision_point_id: str
    selected_option: str
    timestamp: datetime
    impact: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SimulationState:
    """Aggregate root of a simulation run."""
    config: SimulationConfig
    team: List[TeamMember]
    stories: List[UserStory]
    sprints: List[Sprint]
    metrics: SimulationMetrics
    events: List[SimulationEvent] = field(default_factory=list)
    current_sprint: int = 0
    current_day: int = 0
    decisions: List[Decision] = field(default_factory=list)
    # seed the run was drawn from, so any run can be replayed
    seed: Optional[Union[int, float]] = None

    def completed_sprints(self) -> List[Sprint]:
        return [s for s in self.sprints if s.status == SprintStatus.COMPLETED]


def average_experience(team: List[TeamMember]) -> float:
    """Mean experience in years, 0 for an empty roster."""
    if not team:
        return 0.0
    return sum(member.experience for member in team) / len(team)
