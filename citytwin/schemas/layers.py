"""Pydantic schemas for GeoJSON layers."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# The five map layers, in display order
LAYER_NAMES: tuple[str, ...] = ("noise", "buildings", "sensors", "heat", "traffic")


class Geometry(BaseModel):
    """GeoJSON geometry. Coordinates are passed through untouched."""

    type: str = Field(..., description="Geometry type (Point, LineString, Polygon, ...)")
    coordinates: Any = Field(None, description="Nested coordinate arrays")


class Feature(BaseModel):
    """A single GeoJSON feature with untyped properties."""

    model_config = ConfigDict(extra="allow")

    type: Literal["Feature"] = "Feature"
    properties: dict[str, Any] = Field(default_factory=dict, description="Raw feature properties")
    geometry: Optional[Geometry] = None

    @field_validator("properties", mode="before")
    @classmethod
    def _null_properties(cls, value: Any) -> Any:
        return {} if value is None else value


class FeatureCollection(BaseModel):
    """A GeoJSON feature collection."""

    model_config = ConfigDict(extra="allow")

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)


class LayerSet(BaseModel):
    """
    The five map layers. A layer that has not been loaded is None.

    Unknown keys are dropped on input, so the slot set never grows.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    noise: Optional[FeatureCollection] = None
    buildings: Optional[FeatureCollection] = None
    sensors: Optional[FeatureCollection] = None
    heat: Optional[FeatureCollection] = None
    traffic: Optional[FeatureCollection] = None

    def features(self, name: str) -> list[Feature]:
        """Features of a layer; absent layers read as empty."""
        if name not in LAYER_NAMES:
            raise ValueError(f"Unknown layer: {name}. Available: {list(LAYER_NAMES)}")
        collection = getattr(self, name)
        return list(collection.features) if collection else []
