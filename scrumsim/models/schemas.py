"""
Pydantic schemas for request validation and state export.

The state schemas mirror every entity of a run so a ``SimulationState`` can
be exported to JSON and rebuilt without loss. Request schemas carry the
bounds callers are expected to enforce before invoking the engine.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scrumsim.models.entities import (
    BurndownPoint,
    Complexity,
    Decision,
    EventImpact,
    EventType,
    Impediment,
    ImpedimentSeverity,
    ImpedimentStatus,
    Priority,
    SimulationConfig,
    SimulationEvent,
    SimulationMetrics,
    SimulationState,
    Sprint,
    SprintStatus,
    StoryStatus,
    TeamMember,
    TeamRole,
    UserStory,
)


# =============================================================================
# Base Schemas
# =============================================================================

class BaseSchema(BaseModel):
    """Base schema with common configuration; strings are kept as given."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class RequestSchema(BaseSchema):
    """Base for inbound requests: strips string whitespace, rejects unknown fields."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
    )


# =============================================================================
# State Schemas
# =============================================================================

class SimulationConfigSchema(BaseSchema):
    """Configuration as recorded on a state; no bounds are enforced here."""

    team_size: int
    sprint_count: int
    sprint_duration: int
    initial_velocity: float
    story_count: int
    technical_debt_level: float
    team_experience: float
    market_pressure: float
    stakeholder_engagement: float
    tooling_quality: float
    process_maturity: float


class TeamMemberSchema(BaseSchema):
    id: str
    name: str
    role: TeamRole
    experience: float
    availability: float
    skills: List[str] = Field(default_factory=list)


class UserStorySchema(BaseSchema):
    id: str
    title: str
    description: str
    priority: Priority
    story_points: int = Field(ge=1)
    complexity: Complexity
    technical_debt: float
    business_value: int = Field(ge=1, le=10)
    status: StoryStatus
    dependencies: List[str] = Field(default_factory=list)


class BurndownPointSchema(BaseSchema):
    date: datetime
    remaining_points: int
    remaining_hours: int


class ImpedimentSchema(BaseSchema):
    id: str
    description: str
    severity: ImpedimentSeverity
    created_at: datetime
    status: ImpedimentStatus


class SprintSchema(BaseSchema):
    id: str
    name: str
    start_date: datetime
    end_date: datetime
    duration: int
    velocity: float
    capacity: float
    stories: List[UserStorySchema] = Field(default_factory=list)
    status: SprintStatus
    burndown_data: List[BurndownPointSchema] = Field(default_factory=list)
    impediments: List[ImpedimentSchema] = Field(default_factory=list)


class EventImpactSchema(BaseSchema):
    velocity: Optional[float] = None
    morale: Optional[float] = None
    quality: Optional[float] = None
    timeline: Optional[float] = None


class SimulationEventSchema(BaseSchema):
    id: str
    type: EventType
    timestamp: datetime
    description: str
    impact: EventImpactSchema = Field(default_factory=EventImpactSchema)


class SimulationMetricsSchema(BaseSchema):
    total_stories_completed: int = Field(ge=0)
    average_velocity: float
    sprint_success_rate: float = Field(ge=0.0, le=100.0)
    technical_debt_score: float = Field(ge=0.0, le=10.0)
    team_morale: float = Field(ge=1.0, le=10.0)
    stakeholder_satisfaction: float = Field(ge=1.0, le=10.0)
    timeline_accuracy: float = Field(ge=0.0, le=100.0)
    quality_score: float = Field(ge=1.0, le=10.0)


class DecisionSchema(BaseSchema):
    id: str
    scenario_id: str
    decision_point_id: str
    selected_option: str
    timestamp: datetime
    impact: Dict[str, Any] = Field(default_factory=dict)


class SimulationStateSchema(BaseSchema):
    """Full export of a simulation run."""

    config: SimulationConfigSchema
    team: List[TeamMemberSchema]
    stories: List[UserStorySchema]
    sprints: List[SprintSchema]
    events: List[SimulationEventSchema]
    current_sprint: int
    current_day: int
    metrics: SimulationMetricsSchema
    decisions: List[DecisionSchema] = Field(default_factory=list)
    seed: Optional[Union[int, float]] = None


def state_to_schema(state: SimulationState) -> SimulationStateSchema:
    """Export a state; nested dataclasses are read through their attributes."""
    return SimulationStateSchema.model_validate(state)


def _story_from_schema(story: UserStorySchema) -> UserStory:
    return UserStory(
        id=story.id,
        title=story.title,
        description=story.description,
        priority=story.priority,
        story_points=story.story_points,
        complexity=story.complexity,
        technical_debt=story.technical_debt,
        business_value=story.business_value,
        status=story.status,
        dependencies=list(story.dependencies),
    )


def _sprint_from_schema(sprint: SprintSchema) -> Sprint:
    return Sprint(
        id=sprint.id,
        name=sprint.name,
        start_date=sprint.start_date,
        end_date=sprint.end_date,
        duration=sprint.duration,
        velocity=sprint.velocity,
        capacity=sprint.capacity,
        stories=[_story_from_schema(s) for s in sprint.stories],
        status=sprint.status,
        burndown_data=[BurndownPoint(**p.model_dump()) for p in sprint.burndown_data],
        impediments=[Impediment(**i.model_dump()) for i in sprint.impediments],
    )


def schema_to_state(schema: SimulationStateSchema) -> SimulationState:
    """Rebuild the dataclass state from an exported schema."""
    return SimulationState(
        config=SimulationConfig(**schema.config.model_dump()),
        team=[
            TeamMember(**member.model_dump())
            for member in schema.team
        ],
        stories=[_story_from_schema(s) for s in schema.stories],
        sprints=[_sprint_from_schema(s) for s in schema.sprints],
        metrics=SimulationMetrics(**schema.metrics.model_dump()),
        events=[
            SimulationEvent(
                id=event.id,
                type=event.type,
                timestamp=event.timestamp,
                description=event.description,
                impact=EventImpact(**event.impact.model_dump()),
            )
            for event in schema.events
        ],
        current_sprint=schema.current_sprint,
        current_day=schema.current_day,
        decisions=[Decision(**d.model_dump()) for d in schema.decisions],
        seed=schema.seed,
    )


# =============================================================================
# Request Schemas
# =============================================================================

class SimulationConfigRequest(RequestSchema):
    """Simulation configuration with the bounds callers must honour."""

    team_size: int = Field(default=6, ge=1, le=20)
    sprint_count: int = Field(default=4, ge=1, le=24)
    sprint_duration: int = Field(default=2, ge=1, le=4, description="Weeks per sprint")
    initial_velocity: float = Field(default=25.0, ge=1.0, le=200.0)
    story_count: int = Field(default=20, ge=1, le=200)
    technical_debt_level: float = Field(default=5.0, ge=0.0, le=10.0)
    team_experience: float = Field(default=4.0, ge=0.0, le=40.0, description="Average years")
    market_pressure: float = Field(default=6.0, ge=0.0, le=10.0)
    stakeholder_engagement: float = Field(default=7.0, ge=0.0, le=10.0)
    tooling_quality: float = Field(default=7.0, ge=0.0, le=10.0)
    process_maturity: float = Field(default=6.0, ge=0.0, le=10.0)

    def to_config(self) -> SimulationConfig:
        return SimulationConfig(**self.model_dump())


class DecisionInput(RequestSchema):
    """A training decision to record on the run."""

    decision_point_id: str = Field(..., min_length=1, max_length=255)
    option_id: str = Field(..., min_length=1, max_length=255)


class SimulationSummaryRequest(RequestSchema):
    """Request to run a single simulation and report only its summary."""

    config: SimulationConfigRequest = Field(default_factory=SimulationConfigRequest)
    seed: Optional[int] = Field(None, ge=0)
    start_date: Optional[datetime] = None


class SimulationRunRequest(SimulationSummaryRequest):
    """Request to run a single simulation and record training decisions on it."""

    decisions: List[DecisionInput] = Field(default_factory=list)


class BatchRunRequest(RequestSchema):
    """Request to run the same configuration under several seeds."""

    config: SimulationConfigRequest = Field(default_factory=SimulationConfigRequest)
    seeds: List[int] = Field(..., min_length=1)
    start_date: Optional[datetime] = None

    @field_validator("seeds")
    @classmethod
    def validate_seeds(cls, v: List[int]) -> List[int]:
        if any(seed < 0 for seed in v):
            raise ValueError("Seeds must be non-negative")
        if len(set(v)) != len(v):
            raise ValueError("Seeds must be unique")
        return v


# =============================================================================
# Report Schemas
# =============================================================================

class VelocityPoint(BaseSchema):
    sprint: str
    planned_velocity: float
    actual_velocity: int
    completed_stories: int
    total_stories: int


class BurndownSeriesPoint(BaseSchema):
    sprint: str
    day: int
    date: datetime
    remaining_points: int
    remaining_hours: int


class EventSummary(BaseSchema):
    events_by_type: Dict[str, int] = Field(default_factory=dict)
    impediments_by_severity: Dict[str, int] = Field(default_factory=dict)
    total_events: int = 0
    total_impediments: int = 0


class SimulationSummary(BaseSchema):
    """Headline metrics plus the derived series of a run."""

    seed: Optional[int] = None
    metrics: SimulationMetricsSchema
    velocity: List[VelocityPoint] = Field(default_factory=list)
    burndown: List[BurndownSeriesPoint] = Field(default_factory=list)
    story_status: Dict[str, int] = Field(default_factory=dict)
    events: EventSummary = Field(default_factory=EventSummary)


class MetricStats(BaseSchema):
    mean: float
    minimum: float
    maximum: float


class BatchSummary(BaseSchema):
    """Aggregate of independent runs over several seeds."""

    runs: List[SimulationSummary]
    statistics: Dict[str, MetricStats] = Field(default_factory=dict)


# =============================================================================
# Error & Health Schemas
# =============================================================================

class ErrorResponse(BaseSchema):
    """Standard error response."""

    error: str
    message: str
    details: Optional[Any] = None


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str
    version: str
    environment: str
