"""Statistical answers to assistant questions about the current layers."""

from collections import Counter
from typing import Any, Callable, Optional

from citytwin.engine.numeric import format_number, stats, to_number
from citytwin.engine.personas import advise
from citytwin.engine.scoring import grade_for_score
from citytwin.engine.topics import Topic, classify
from citytwin.logging_config import get_logger
from citytwin.schemas.context import QueryContext
from citytwin.schemas.layers import LayerSet

logger = get_logger('assistant')

SUMMARY_ANSWER = (
    'Layers: noise, buildings, sensors, heat vulnerability, traffic. '
    'Ask: "highest noise", "average traffic", "tallest building", "worst heat area".'
)
UNKNOWN_ANSWER = (
    "I didn't recognize the topic. "
    "Try noise, traffic speeds, building heights, heat vulnerability, or sensors."
)


def _label(properties: dict[str, Any], *keys: str) -> str:
    """First property among ``keys`` that is set, as text."""
    for key in keys:
        value = properties.get(key)
        if value is None:
            continue
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return format_number(value)
        return str(value)
    return "unknown"


def _entries(layers: LayerSet, layer: str, value_key: str, *label_keys: str) -> list[tuple[str, Optional[float]]]:
    return [
        (_label(feature.properties, *label_keys), to_number(feature.properties.get(value_key)))
        for feature in layers.features(layer)
    ]


def _at(entries: list[tuple[str, Optional[float]]], target: float) -> list[tuple[str, float]]:
    """Every entry whose value equals ``target``, in feature order."""
    return [(label, value) for label, value in entries if value is not None and value == target]


def answer_noise(layers: LayerSet) -> str:
    entries = _entries(layers, "noise", "level", "id")
    summary = stats([value for _, value in entries if value is not None])
    if summary is None:
        return "No noise data found."
    loudest = ", ".join(label for label, _ in _at(entries, summary.max))
    return (
        f"Noise — min: {format_number(summary.min)}, max: {format_number(summary.max)}, "
        f"avg: {format_number(summary.avg)}. Highest in: {loudest}."
    )


def answer_traffic(layers: LayerSet) -> str:
    entries = _entries(layers, "traffic", "speed_kmh", "road")
    summary = stats([value for _, value in entries if value is not None])
    if summary is None:
        return "No traffic data found."
    slowest = ", ".join(label for label, _ in _at(entries, summary.min))
    return (
        f"Traffic — min: {format_number(summary.min)} km/h, max: {format_number(summary.max)} km/h, "
        f"avg: {format_number(summary.avg)} km/h. Slowest: {slowest}."
    )


def answer_buildings(layers: LayerSet) -> str:
    entries = _entries(layers, "buildings", "height_m", "name", "id")
    summary = stats([value for _, value in entries if value is not None])
    if summary is None:
        return "No buildings data found."
    tallest = ", ".join(f"{label} ({format_number(value)} m)" for label, value in _at(entries, summary.max))
    return (
        f"Buildings — min: {format_number(summary.min)} m, max: {format_number(summary.max)} m, "
        f"avg: {format_number(summary.avg)} m. Tallest: {tallest}."
    )


def answer_heat(layers: LayerSet) -> str:
    entries = _entries(layers, "heat", "vulnerability", "zone")
    summary = stats([value for _, value in entries if value is not None])
    if summary is None:
        return "No heat-vulnerability data found."
    worst = ", ".join(f"{label} ({format_number(value)})" for label, value in _at(entries, summary.max))
    return (
        f"Heat vulnerability — min: {format_number(summary.min)}, max: {format_number(summary.max)}, "
        f"avg: {format_number(summary.avg)}. Highest: {worst}."
    )


def answer_sensors(layers: LayerSet) -> str:
    features = layers.features("sensors")
    if not features:
        return "No sensor data found."
    # Counter keeps first-seen order
    kinds = Counter(_label(feature.properties, "type") for feature in features)
    breakdown = ", ".join(f"{kind}: {count}" for kind, count in kinds.items())
    return f"{len(features)} sensors. Types — {breakdown}."


def answer_summary(layers: LayerSet) -> str:
    return SUMMARY_ANSWER


def answer_unknown(layers: LayerSet) -> str:
    return UNKNOWN_ANSWER


TOPIC_ANSWERS: dict[Topic, Callable[[LayerSet], str]] = {
    Topic.NOISE: answer_noise,
    Topic.TRAFFIC: answer_traffic,
    Topic.BUILDINGS: answer_buildings,
    Topic.HEAT: answer_heat,
    Topic.SENSORS: answer_sensors,
    Topic.SUMMARY: answer_summary,
    Topic.UNKNOWN: answer_unknown,
}


def answer(topic: Topic, layers: LayerSet) -> str:
    """Topical sentence for a layer topic. Score questions need the full context."""
    if topic not in TOPIC_ANSWERS:
        raise ValueError(f"Topic {topic.value} is answered from the context, not the layers")
    return TOPIC_ANSWERS[topic](layers)


def answer_scores(context: QueryContext) -> str:
    """Report the health score and city ranking carried by the context."""
    parts = []
    if context.health_score is not None:
        parts.append(f"Health & air score: {context.health_score} ({grade_for_score(context.health_score)}).")
    if context.city_scores:
        ranking = ", ".join(
            f"{item.name}: {item.score}" + (" (recommended)" if item.recommended else "")
            for item in context.city_scores
        )
        parts.append(f"City scores — {ranking}.")
    if not parts:
        return "No score data found."
    return " ".join(parts)


def respond(question: str, context: QueryContext) -> str:
    """Full assistant reply: topical answer, blank line, persona advice."""
    topic = classify(question)
    if topic is Topic.SCORES:
        body = answer_scores(context)
    else:
        body = answer(topic, context.layers)
    logger.info(f"ASK | topic={topic.value} | persona={context.persona.value} | question={question[:120]!r}")
    return f"{body}\n\n{advise(context.persona)}"
