"""Pydantic schemas for API validation."""

from citytwin.schemas.layers import (
    LAYER_NAMES,
    Geometry,
    Feature,
    FeatureCollection,
    LayerSet,
)
from citytwin.schemas.context import (
    Persona,
    CityScoreItem,
    QueryContext,
    AskRequest,
    AskResponse,
    ScoreRequest,
    ScoreResponse,
    HealthStateResponse,
)
from citytwin.schemas.simulation import (
    SimulationRequest,
    SimulationResponse,
    ResetRequest,
    PlaceResult,
)

__all__ = [
    "LAYER_NAMES",
    "Geometry",
    "Feature",
    "FeatureCollection",
    "LayerSet",
    "Persona",
    "CityScoreItem",
    "QueryContext",
    "AskRequest",
    "AskResponse",
    "ScoreRequest",
    "ScoreResponse",
    "HealthStateResponse",
    "SimulationRequest",
    "SimulationResponse",
    "ResetRequest",
    "PlaceResult",
]
