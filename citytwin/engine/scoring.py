"""Composite health and city scores."""

import threading
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional, Sequence

from citytwin.config import (
    DEFAULT_LAYER_AVERAGE,
    FEATURED_CITY,
    FEATURED_CITY_MIN_SCORE,
    HEALTH_HEAT_WEIGHT,
    HEALTH_NOISE_WEIGHT,
    HEAT_SCORE_KEYS,
    NOISE_SCORE_KEYS,
    SCORE_GRADES,
)
from citytwin.engine.cities import CITY_BASELINES, CityBaseline
from citytwin.engine.numeric import clamp, round_half_up, to_number
from citytwin.engine.personas import get_persona
from citytwin.logging_config import get_logger
from citytwin.schemas.context import CityScoreItem, Persona, QueryContext
from citytwin.schemas.layers import Feature, LayerSet

logger = get_logger(__name__)


def to_score(risk: float) -> int:
    """Turn a 0-100 risk into a 0-100 score, higher is better."""
    return int(round_half_up(clamp(100 - risk)))


def layer_average(features: Iterable[Feature], keys: Sequence[str]) -> Optional[float]:
    """
    Mean over features of the first numeric property among ``keys``.

    Features with none of the keys are skipped. Returns None when nothing
    usable was found.
    """
    values = []
    for feature in features:
        for key in keys:
            number = to_number(feature.properties.get(key))
            if number is not None:
                values.append(number)
                break
    if not values:
        return None
    return sum(values) / len(values)


def compute_health_score(layers: LayerSet) -> int:
    """
    Health & air score from the noise and heat layers.

    risk = 0.6 * noise + 0.4 * heat, each average clamped to [0, 100] and
    defaulting to 50 when its layer has no usable values.
    """
    noise_avg = layer_average(layers.features("noise"), NOISE_SCORE_KEYS)
    heat_avg = layer_average(layers.features("heat"), HEAT_SCORE_KEYS)

    noise = clamp(DEFAULT_LAYER_AVERAGE if noise_avg is None else noise_avg)
    heat = clamp(DEFAULT_LAYER_AVERAGE if heat_avg is None else heat_avg)

    risk = HEALTH_NOISE_WEIGHT * noise + HEALTH_HEAT_WEIGHT * heat
    score = to_score(risk)
    logger.debug(f"HEALTH_SCORE | noise_avg={noise:.2f} | heat_avg={heat:.2f} | score={score}")
    return score


def city_risk(city: CityBaseline, persona: Any) -> float:
    """Persona-weighted blend of a city's baseline inputs."""
    weights = get_persona(persona).risk_weights
    return sum(weight * getattr(city, field) for field, weight in weights.items())


def recommend_city(items: Sequence[CityScoreItem], persona: Any) -> list[CityScoreItem]:
    """
    Flag exactly one city as recommended.

    Highest score wins, the earlier city on ties. For citizens the featured
    city is recommended whenever it reaches its threshold, even if another
    city scores higher.
    """
    if not items:
        return []

    best = items[0]
    for item in items[1:]:
        best = best if best.score >= item.score else item

    if Persona.resolve(persona) is Persona.CITIZEN:
        featured = next((item for item in items if item.name == FEATURED_CITY), None)
        if featured is not None and featured.score >= FEATURED_CITY_MIN_SCORE:
            best = featured

    return [item.model_copy(update={"recommended": item is best}) for item in items]


def compute_city_scores(
    persona: Any,
    baselines: Optional[dict[str, CityBaseline]] = None,
) -> list[CityScoreItem]:
    """Score every city for a persona and flag the recommendation."""
    cities = CITY_BASELINES if baselines is None else baselines
    items = [
        CityScoreItem(name=city.name, score=to_score(city_risk(city, persona)))
        for city in cities.values()
    ]
    return recommend_city(items, persona)


def grade_for_score(score: Optional[int]) -> str:
    """Traffic-light label for a health score."""
    if score is None:
        return "—"
    for lower_bound, label in SCORE_GRADES:
        if score >= lower_bound:
            return label
    return SCORE_GRADES[-1][1]


def attach_scores(context: QueryContext) -> QueryContext:
    """Fill in any scores the client did not send."""
    update = {}
    if context.health_score is None:
        update["health_score"] = compute_health_score(context.layers)
    if context.city_scores is None:
        update["city_scores"] = compute_city_scores(context.persona)
    return context.model_copy(update=update) if update else context


# =============================================================================
# Baseline Retention
# =============================================================================

@dataclass(frozen=True)
class HealthState:
    """Latest health score and the first one seen since the last reset."""

    current: Optional[int] = None
    baseline: Optional[int] = None

    @property
    def delta(self) -> Optional[int]:
        if self.current is None or self.baseline is None:
            return None
        return self.current - self.baseline

    def advance(self, score: int) -> "HealthState":
        """Record a new score; the first one becomes the baseline."""
        baseline = score if self.baseline is None else self.baseline
        return replace(self, current=score, baseline=baseline)

    def reset(self) -> "HealthState":
        return HealthState()


class HealthScoreTracker:
    """Holds one HealthState for the process and serializes updates to it."""

    def __init__(self, state: Optional[HealthState] = None):
        self._lock = threading.Lock()
        self._state = state or HealthState()

    @property
    def state(self) -> HealthState:
        with self._lock:
            return self._state

    def update(self, score: int) -> HealthState:
        with self._lock:
            self._state = self._state.advance(score)
            state = self._state
        logger.info(f"HEALTH_SCORE_UPDATED | current={state.current} | baseline={state.baseline}")
        return state

    def reset(self) -> HealthState:
        with self._lock:
            self._state = self._state.reset()
            state = self._state
        logger.info("HEALTH_BASELINE_RESET")
        return state
