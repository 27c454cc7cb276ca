"""API routers for CityTwin."""

from citytwin.routers import ask, scores, simulate, layers, observability

__all__ = [
    "ask",
    "scores",
    "simulate",
    "layers",
    "observability",
]
