"""Persona definitions for CityTwin."""

from dataclasses import dataclass
from typing import Any

from citytwin.config import CITY_RISK_WEIGHTS
from citytwin.schemas.context import Persona


@dataclass
class PersonaDefinition:
    """How a persona weighs the layers and what the assistant tells it."""

    key: Persona
    name: str
    description: str

    # Appended after every assistant answer
    advice: str

    # Greeting shown when the persona is picked
    greeting: str

    # City baseline field -> weight
    risk_weights: dict[str, float]


PERSONAS: dict[Persona, PersonaDefinition] = {
    Persona.CITIZEN: PersonaDefinition(
        key=Persona.CITIZEN,
        name="Citizen",
        description="General exploration of the city layers",
        advice="Citizen mode: Explore cities, toggle layers, and draw a zone to focus analysis.",
        greeting="Citizen mode: explore layers freely or ask for a quick city summary.",
        risk_weights=CITY_RISK_WEIGHTS["citizen"],
    ),
    Persona.HEALTH: PersonaDefinition(
        key=Persona.HEALTH,
        name="Health",
        description="Residents sensitive to noise and heat exposure",
        advice="Health mode: Prefer areas with lower noise and lower heat vulnerability.",
        greeting="Health mode: prioritize lower noise and heat. I can point to the best zones.",
        risk_weights=CITY_RISK_WEIGHTS["health"],
    ),
    Persona.INVESTOR: PersonaDefinition(
        key=Persona.INVESTOR,
        name="Investor",
        description="Siting schools and housing where traffic is calm",
        advice="Investor mode: Favor areas with calmer traffic and moderate noise for schools/housing.",
        greeting="Investor mode: I'll balance traffic and noise to suggest feasible areas.",
        risk_weights=CITY_RISK_WEIGHTS["investor"],
    ),
}


def get_persona(persona: Any) -> PersonaDefinition:
    """Get a persona definition. Unset or unknown values fall back to citizen."""
    return PERSONAS[Persona.resolve(persona)]


def get_all_personas() -> list[PersonaDefinition]:
    """Get all persona definitions."""
    return list(PERSONAS.values())


def advise(persona: Any) -> str:
    """Advisory sentence appended to every assistant answer."""
    return get_persona(persona).advice
