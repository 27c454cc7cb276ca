"""Data loading and external services for CityTwin."""

from citytwin.services import sample_data, geocoder

__all__ = [
    "sample_data",
    "geocoder",
]
