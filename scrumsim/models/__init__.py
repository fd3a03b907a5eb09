"""
Data models package.

Contains the simulation entities and Pydantic schemas.
"""

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
from scrumsim.models.schemas import (
    BatchRunRequest,
    BatchSummary,
    ErrorResponse,
    HealthResponse,
    SimulationRunRequest,
    SimulationStateSchema,
    SimulationSummary,
    SimulationSummaryRequest,
    schema_to_state,
    state_to_schema,
)

__all__ = [
    # Entities
    "BurndownPoint",
    "Complexity",
    "Decision",
    "EventImpact",
    "EventType",
    "Impediment",
    "ImpedimentSeverity",
    "ImpedimentStatus",
    "Priority",
    "SimulationConfig",
    "SimulationEvent",
    "SimulationMetrics",
    "SimulationState",
    "Sprint",
    "SprintStatus",
    "StoryStatus",
    "TeamMember",
    "TeamRole",
    "UserStory",
    # Schemas
    "BatchRunRequest",
    "BatchSummary",
    "ErrorResponse",
    "HealthResponse",
    "SimulationRunRequest",
    "SimulationStateSchema",
    "SimulationSummary",
    "SimulationSummaryRequest",
    "schema_to_state",
    "state_to_schema",
]
