"""Static city baselines for CityTwin."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CityBaseline:
    """Reference risk inputs (0-100, higher is worse) and map preset for a city."""

    key: str
    name: str
    noise: float
    heat: float
    traffic: float

    # Map preset
    latitude: float
    longitude: float
    zoom: int = 12


# Iteration order is the tie-break order for recommendations
CITY_BASELINES: dict[str, CityBaseline] = {
    "essaouira": CityBaseline(
        key="essaouira",
        name="Essaouira",
        noise=22,
        heat=18,
        traffic=15,
        latitude=31.5085,
        longitude=-9.76,
        zoom=13,
    ),
    "casablanca": CityBaseline(
        key="casablanca",
        name="Casablanca",
        noise=68,
        heat=46,
        traffic=74,
        latitude=33.5731,
        longitude=-7.5898,
    ),
    "madrid": CityBaseline(
        key="madrid",
        name="Madrid",
        noise=58,
        heat=64,
        traffic=55,
        latitude=40.4168,
        longitude=-3.7038,
    ),
    "nyc": CityBaseline(
        key="nyc",
        name="New York",
        noise=80,
        heat=50,
        traffic=85,
        latitude=40.7128,
        longitude=-74.006,
    ),
}


def find_city(query: str) -> Optional[CityBaseline]:
    """Look a city up by preset key or display name, case-insensitively."""
    key = (query or "").strip().lower()
    if not key:
        return None
    if key in CITY_BASELINES:
        return CITY_BASELINES[key]
    for city in CITY_BASELINES.values():
        if city.name.lower() == key:
            return city
    return None
