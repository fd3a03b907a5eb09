"""
Simulation Controller - REST API for running simulations.

Implements the simulation endpoints:
- /simulate/run
- /simulate/summary
- /simulate/batch

Runs are stateless: every request builds its own engine and nothing is
stored after the response is sent.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from scrumsim.models.schemas import (
    BatchRunRequest,
    BatchSummary,
    ErrorResponse,
    SimulationRunRequest,
    SimulationStateSchema,
    SimulationSummary,
    SimulationSummaryRequest,
    state_to_schema,
)
from scrumsim.services.simulation_service import SimulationService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["simulation"])


# =============================================================================
# Dependencies
# =============================================================================

def get_simulation_service() -> SimulationService:
    """Dependency to get simulation service."""
    return SimulationService()


# =============================================================================
# Simulation Endpoints
# =============================================================================

@router.post(
    "/simulate/run",
    response_model=SimulationStateSchema,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid configuration"},
    },
)
def run_simulation(
    request: SimulationRunRequest,
    service: SimulationService = Depends(get_simulation_service),
) -> SimulationStateSchema:
    """
    Run a complete simulation and return its full state.

    **Example Request:**
    ```json
    {
        "config": {"team_size": 5, "sprint_count": 3, "initial_velocity": 20},
        "seed": 42,
        "decisions": [{"decision_point_id": "dp-1", "option_id": "a"}]
    }
    ```
    """
    state = service.run(request)
    return state_to_schema(state)


@router.post(
    "/simulate/summary",
    response_model=SimulationSummary,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid configuration"},
    },
)
def summarize_simulation(
    request: SimulationSummaryRequest,
    service: SimulationService = Depends(get_simulation_service),
) -> SimulationSummary:
    """
    Run a simulation and return headline metrics with chart series.
    """
    return service.summarize(request)


@router.post(
    "/simulate/batch",
    response_model=BatchSummary,
    responses={
        400: {"model": ErrorResponse, "description": "Too many runs requested"},
        422: {"model": ErrorResponse, "description": "Invalid configuration"},
    },
)
def run_batch(
    request: BatchRunRequest,
    service: SimulationService = Depends(get_simulation_service),
) -> BatchSummary:
    """
    Run the same configuration once per seed and aggregate the results.
    """
    try:
        return service.run_batch(
            request.config.to_config(),
            request.seeds,
            start_date=request.start_date,
        )
    except ValueError as e:
        logger.warning("batch_rejected", seeds=len(request.seeds), reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
