"""Pydantic schemas for what-if simulations and city search."""

from typing import Literal

from pydantic import BaseModel, Field

from citytwin.schemas.layers import LayerSet


class SimulationRequest(BaseModel):
    """Apply a simulation to the current layers."""

    layers: LayerSet = Field(default_factory=LayerSet)
    intensity: float = Field(default=0.5, ge=0, le=1, description="Simulation strength (0-1)")


class ResetRequest(BaseModel):
    """Restore the simulated layers from sample data."""

    layers: LayerSet = Field(default_factory=LayerSet)


class SimulationResponse(BaseModel):
    """Layers after the simulation ran."""

    layers: LayerSet


class PlaceResult(BaseModel):
    """Where to center the map for a searched city."""

    name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    zoom: int = Field(default=12, ge=0, le=20)
    source: Literal["preset", "nominatim"]
