#!/usr/bin/env python3
"""
Demo script showing CityTwin in action.

Usage:
    python scripts/demo.py

Walks through the dashboard flow without a browser:
1. Ask the assistant about each layer as every persona
2. Score the sample layers and rank the cities
3. Plant trees, calm traffic, and watch the health score move
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from citytwin.config import get_settings
from citytwin.engine.answers import respond
from citytwin.engine.scoring import (
    HealthScoreTracker,
    attach_scores,
    compute_city_scores,
    compute_health_score,
    grade_for_score,
)
from citytwin.engine.simulation import calm_traffic, plant_trees
from citytwin.schemas.context import Persona, QueryContext
from citytwin.services.sample_data import load_layers

QUESTIONS = [
    "Which area has the highest noise levels?",
    "Which roads have the lowest speed?",
    "What is the tallest building?",
    "Where is heat vulnerability worst?",
    "How many sensors are there?",
    "Give me an overview",
    "Which city do you recommend?",
]


def print_header(title: str):
    """Print a formatted header."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)


def print_scores(tracker: HealthScoreTracker, layers, persona: Persona):
    """Score the layers and print the snapshot."""
    state = tracker.update(compute_health_score(layers))
    delta = f"{state.delta:+d}" if state.delta else "—"
    print(f"\n❤️  Health & Air: {state.current} ({grade_for_score(state.current)}) | baseline {state.baseline} | Δ {delta}")
    for city in compute_city_scores(persona):
        marker = "⭐" if city.recommended else "  "
        print(f"   {marker} {city.name}: {city.score}")


def main():
    settings = get_settings()
    layers = load_layers()
    tracker = HealthScoreTracker()

    for persona in Persona:
        print_header(f"Assistant ({persona.value})")
        context = attach_scores(QueryContext(persona=persona, summary=settings.context_summary, layers=layers))
        for question in QUESTIONS:
            print(f"\n❓ {question}")
            print(f"💬 {respond(question, context)}")

    print_header("Scores")
    print_scores(tracker, layers, Persona.CITIZEN)

    print_header("Simulation: plant trees (intensity 1.0)")
    layers = plant_trees(layers, 1.0)
    print_scores(tracker, layers, Persona.CITIZEN)

    print_header("Simulation: calm traffic (intensity 1.0)")
    layers = calm_traffic(layers, 1.0)
    context = QueryContext(layers=layers)
    print(f"💬 {respond('average traffic speed', context)}")


if __name__ == "__main__":
    main()
