"""Question answering and scoring engine components."""

from citytwin.engine.numeric import StatsResult, to_number, numeric_values, stats
from citytwin.engine.topics import Topic, classify
from citytwin.engine.answers import answer, answer_scores, respond
from citytwin.engine.personas import PERSONAS, PersonaDefinition, get_persona, advise
from citytwin.engine.cities import CITY_BASELINES, CityBaseline, find_city
from citytwin.engine.scoring import (
    HealthScoreTracker,
    HealthState,
    attach_scores,
    compute_city_scores,
    compute_health_score,
    grade_for_score,
    recommend_city,
)
from citytwin.engine.simulation import plant_trees, calm_traffic, reset_simulation

__all__ = [
    "StatsResult",
    "to_number",
    "numeric_values",
    "stats",
    "Topic",
    "classify",
    "answer",
    "answer_scores",
    "respond",
    "PERSONAS",
    "PersonaDefinition",
    "get_persona",
    "advise",
    "CITY_BASELINES",
    "CityBaseline",
    "find_city",
    "HealthScoreTracker",
    "HealthState",
    "attach_scores",
    "compute_city_scores",
    "compute_health_score",
    "grade_for_score",
    "recommend_city",
    "plant_trees",
    "calm_traffic",
    "reset_simulation",
]
