"""Health check and reference data endpoints."""

from fastapi import APIRouter

from citytwin.engine.cities import CITY_BASELINES
from citytwin.engine.personas import PERSONAS
from citytwin.engine.topics import TOPIC_RULES

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "citytwin",
        "version": "0.1.0",
    }


@router.get("/cities")
async def list_cities():
    """List the city baselines used for composite scores."""
    return {
        "cities": [
            {
                "key": c.key,
                "name": c.name,
                "noise": c.noise,
                "heat": c.heat,
                "traffic": c.traffic,
                "latitude": c.latitude,
                "longitude": c.longitude,
                "zoom": c.zoom,
            }
            for c in CITY_BASELINES.values()
        ]
    }


@router.get("/personas")
async def list_personas():
    """List persona definitions."""
    return {
        "personas": [
            {
                "key": p.key.value,
                "name": p.name,
                "description": p.description,
                "greeting": p.greeting,
                "risk_weights": p.risk_weights,
            }
            for p in PERSONAS.values()
        ]
    }


@router.get("/topics")
async def list_topics():
    """Keywords the assistant recognises, in match order."""
    return {
        "topics": [
            {"topic": topic.value, "keywords": list(keywords)}
            for keywords, topic in TOPIC_RULES
        ]
    }
