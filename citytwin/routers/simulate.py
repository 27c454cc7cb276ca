"""What-if simulation endpoints."""

from fastapi import APIRouter

from citytwin.engine.simulation import calm_traffic, plant_trees, reset_simulation
from citytwin.schemas.simulation import ResetRequest, SimulationRequest, SimulationResponse
from citytwin.services.sample_data import load_layers

router = APIRouter(prefix="/simulate")


@router.post("/plant-trees", response_model=SimulationResponse)
async def simulate_plant_trees(request: SimulationRequest):
    """Lower noise levels in proportion to intensity."""
    return SimulationResponse(layers=plant_trees(request.layers, request.intensity))


@router.post("/calm-traffic", response_model=SimulationResponse)
async def simulate_calm_traffic(request: SimulationRequest):
    """Pull road speeds toward 30 km/h in proportion to intensity."""
    return SimulationResponse(layers=calm_traffic(request.layers, request.intensity))


@router.post("/reset", response_model=SimulationResponse)
async def simulate_reset(request: ResetRequest):
    """Restore noise and traffic from the sample data."""
    return SimulationResponse(layers=reset_simulation(request.layers, load_layers()))
