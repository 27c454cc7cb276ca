"""What-if simulations over the map layers.

Each simulation returns a new LayerSet; the input snapshot is never modified.
Features whose value does not parse as a number are carried over untouched.
"""

from typing import Callable, Optional

from citytwin.config import (
    CALM_TRAFFIC_FACTOR,
    CALM_TRAFFIC_MIN_KMH,
    CALM_TRAFFIC_TARGET_KMH,
    TREE_NOISE_REDUCTION,
)
from citytwin.engine.numeric import round_half_up, to_number
from citytwin.logging_config import get_logger
from citytwin.schemas.layers import FeatureCollection, LayerSet

logger = get_logger(__name__)


def _map_property(
    collection: Optional[FeatureCollection],
    key: str,
    transform: Callable[[float], float],
) -> Optional[FeatureCollection]:
    if collection is None:
        return None
    features = []
    for feature in collection.features:
        value = to_number(feature.properties.get(key))
        if value is None:
            features.append(feature)
            continue
        properties = {**feature.properties, key: transform(value)}
        features.append(feature.model_copy(update={"properties": properties}))
    return collection.model_copy(update={"features": features})


def plant_trees(layers: LayerSet, intensity: float) -> LayerSet:
    """Trees absorb noise: every level drops by up to 30% at full intensity."""
    factor = 1 - TREE_NOISE_REDUCTION * intensity
    noise = _map_property(layers.noise, "level", lambda level: max(0.0, level * factor))
    logger.info(f"SIMULATION | plant_trees | intensity={intensity:.2f}")
    return layers.model_copy(update={"noise": noise})


def calm_traffic(layers: LayerSet, intensity: float) -> LayerSet:
    """Pull every road speed toward 30 km/h, rounded to 0.1 and never below 5."""

    def calm(speed: float) -> float:
        reduced = speed - (speed - CALM_TRAFFIC_TARGET_KMH) * CALM_TRAFFIC_FACTOR * intensity
        return max(CALM_TRAFFIC_MIN_KMH, round_half_up(reduced, 1))

    traffic = _map_property(layers.traffic, "speed_kmh", calm)
    logger.info(f"SIMULATION | calm_traffic | intensity={intensity:.2f}")
    return layers.model_copy(update={"traffic": traffic})


def reset_simulation(layers: LayerSet, pristine: LayerSet) -> LayerSet:
    """Restore the simulated layers (noise, traffic) from a pristine snapshot."""
    logger.info("SIMULATION | reset")
    return layers.model_copy(update={"noise": pristine.noise, "traffic": pristine.traffic})
