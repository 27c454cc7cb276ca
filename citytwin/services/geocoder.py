"""City search: bundled presets first, then Nominatim."""

import time
from typing import Optional

import httpx

from citytwin.config import get_settings
from citytwin.engine.cities import find_city
from citytwin.logging_config import get_logger
from citytwin.schemas.simulation import PlaceResult

logger = get_logger(__name__)

NOMINATIM_ZOOM = 12


class GeocodingError(Exception):
    """Raised when the geocoding service fails or returns non-2xx."""
    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Geocoding error ({status}): {body}")


async def search_city(query: str, client: Optional[httpx.AsyncClient] = None) -> Optional[PlaceResult]:
    """
    Resolve a city name to a map position.

    Preset cities are answered locally. Anything else goes to the Nominatim
    search API; None means nothing matched.

    Args:
        query: Free-text city name
        client: Optional HTTP client (one is created per call otherwise)
    """
    name = (query or "").strip()
    if not name:
        return None

    city = find_city(name)
    if city is not None:
        return PlaceResult(
            name=city.name,
            latitude=city.latitude,
            longitude=city.longitude,
            zoom=city.zoom,
            source="preset",
        )

    settings = get_settings()
    url = f"{settings.nominatim_base_url.rstrip('/')}/search"
    params = {"format": "json", "q": name, "limit": 1}
    headers = {"Accept-Language": "en", "User-Agent": settings.nominatim_user_agent}

    start_time = time.time()
    logger.info(f"→ GEOCODE | query={name!r}")
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.geocode_timeout) as own_client:
                resp = await own_client.get(url, params=params, headers=headers)
        else:
            resp = await client.get(url, params=params, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"✗ GEOCODE_FAILED | query={name!r} | error={e}")
        raise GeocodingError(0, str(e)) from e

    duration = time.time() - start_time

    if resp.status_code != 200:
        logger.error(f"✗ GEOCODE_FAILED | status={resp.status_code} | error={resp.text[:200]} | duration={duration:.3f}s")
        raise GeocodingError(resp.status_code, resp.text)

    data = resp.json()
    if not isinstance(data, list) or not data:
        logger.info(f"✓ GEOCODE_NO_MATCH | query={name!r} | duration={duration:.3f}s")
        return None

    first = data[0]
    try:
        place = PlaceResult(
            name=first.get("display_name") or name,
            latitude=float(first["lat"]),
            longitude=float(first["lon"]),
            zoom=NOMINATIM_ZOOM,
            source="nominatim",
        )
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodingError(resp.status_code, f"Unexpected result: {first}") from e

    logger.info(f"✓ GEOCODE_SUCCESS | query={name!r} | lat={place.latitude} | lon={place.longitude} | duration={duration:.3f}s")
    return place
