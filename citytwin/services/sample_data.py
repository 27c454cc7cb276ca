"""Bundled synthetic layers for the Essaouira demo."""

import json
from pathlib import Path

from citytwin.config import get_settings
from citytwin.logging_config import get_logger
from citytwin.schemas.layers import LAYER_NAMES, FeatureCollection, LayerSet

logger = get_logger(__name__)

SAMPLE_DATA_DIR = Path(__file__).parent.parent / "sample_data"

LAYER_FILES: dict[str, str] = {
    "noise": "noise.geojson",
    "buildings": "buildings.geojson",
    "sensors": "sensors.geojson",
    "heat": "heat-vulnerability.geojson",
    "traffic": "traffic.geojson",
}


def get_sample_data_dir() -> Path:
    """Directory holding the layer files; overridable via SAMPLE_DATA_DIR."""
    override = get_settings().sample_data_dir
    return Path(override) if override else SAMPLE_DATA_DIR


def load_layer(name: str) -> FeatureCollection:
    """Read and validate one layer file."""
    if name not in LAYER_NAMES:
        raise ValueError(f"Unknown layer: {name}. Available: {list(LAYER_NAMES)}")
    path = get_sample_data_dir() / LAYER_FILES[name]
    with open(path, encoding="utf-8") as f:
        collection = FeatureCollection.model_validate(json.load(f))
    logger.debug(f"LAYER_LOADED | layer={name} | features={len(collection.features)} | path={path}")
    return collection


def load_layers() -> LayerSet:
    """Load all five layers."""
    return LayerSet(**{name: load_layer(name) for name in LAYER_NAMES})
