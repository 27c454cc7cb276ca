"""Sample layer and city search endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from citytwin.schemas.layers import LAYER_NAMES, FeatureCollection, LayerSet
from citytwin.schemas.simulation import PlaceResult
from citytwin.services.geocoder import GeocodingError, search_city
from citytwin.services.sample_data import load_layer, load_layers

router = APIRouter()


@router.get("/layers", response_model=LayerSet)
async def get_layers():
    """All five sample layers."""
    return load_layers()


@router.get("/layers/{name}", response_model=FeatureCollection)
async def get_layer(name: str):
    """One sample layer."""
    if name not in LAYER_NAMES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Layer {name} not found. Available: {list(LAYER_NAMES)}",
        )
    return load_layer(name)


@router.get("/places/search", response_model=PlaceResult)
async def search_place(q: str = Query(..., min_length=1, description="City name")):
    """Where to center the map for a city name."""
    try:
        place = await search_city(q)
    except GeocodingError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if place is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No place found for {q!r}",
        )
    return place
