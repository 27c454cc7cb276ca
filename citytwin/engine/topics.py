"""Keyword topic classification for assistant questions."""

from enum import Enum


class Topic(str, Enum):
    """Subjects the assistant can answer."""

    NOISE = "noise"
    TRAFFIC = "traffic"
    BUILDINGS = "buildings"
    HEAT = "heat"
    SENSORS = "sensors"
    SUMMARY = "summary"
    SCORES = "scores"
    UNKNOWN = "unknown"


# Evaluated top to bottom, first match wins.
# "noise and traffic" is a noise question.
TOPIC_RULES: list[tuple[tuple[str, ...], Topic]] = [
    (("noise",), Topic.NOISE),
    (("traffic", "speed"), Topic.TRAFFIC),
    (("building", "height", "tall"), Topic.BUILDINGS),
    (("heat", "vulnerability"), Topic.HEAT),
    (("sensor",), Topic.SENSORS),
    (("summary", "overview"), Topic.SUMMARY),
    (("score", "recommend"), Topic.SCORES),
]


def classify(question: str) -> Topic:
    """Classify a question by case-insensitive keyword containment."""
    text = (question or "").lower()
    for keywords, topic in TOPIC_RULES:
        if any(keyword in text for keyword in keywords):
            return topic
    return Topic.UNKNOWN
