"""Pydantic schemas for the assistant context and scores."""

from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from citytwin.schemas.layers import LayerSet


class Persona(str, Enum):
    """Lens the dashboard is viewed through."""

    CITIZEN = "citizen"
    HEALTH = "health"
    INVESTOR = "investor"

    @classmethod
    def resolve(cls, value: Any) -> "Persona":
        """Map any input to a persona; unset or unrecognised values become citizen."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        return cls.CITIZEN


# Persona field that never fails validation
ResolvedPersona = Annotated[Persona, BeforeValidator(Persona.resolve)]


class CityScoreItem(BaseModel):
    """Composite score for one city."""

    name: str = Field(..., description="City name")
    score: int = Field(..., ge=0, le=100, description="Composite score (0-100, higher is better)")
    recommended: bool = Field(default=False, description="Whether this city is the pick")


class QueryContext(BaseModel):
    """Snapshot of dashboard state passed whole into every answer/score computation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    persona: ResolvedPersona = Persona.CITIZEN
    summary: str = ""
    layers: LayerSet = Field(default_factory=LayerSet)
    health_score: Optional[int] = Field(None, alias="healthScore", description="Health & air score")
    city_scores: Optional[list[CityScoreItem]] = Field(None, alias="cityScores")


# =============================================================================
# Request/Response Schemas
# =============================================================================

class AskRequest(BaseModel):
    """Question for the assistant. Both fields are checked by the route, not here."""

    question: Optional[str] = None
    context: Optional[QueryContext] = None


class AskResponse(BaseModel):
    """Assistant answer. Failures are reported in-band."""

    answer: str


class ScoreRequest(BaseModel):
    """Layer snapshot to score."""

    persona: ResolvedPersona = Persona.CITIZEN
    layers: LayerSet = Field(default_factory=LayerSet)


class HealthStateResponse(BaseModel):
    """Current health score and the session baseline it is compared to."""

    current: Optional[int] = None
    baseline: Optional[int] = None
    delta: Optional[int] = Field(None, description="current - baseline")
    grade: str


class ScoreResponse(BaseModel):
    """Health & air snapshot plus per-city scores."""

    model_config = ConfigDict(populate_by_name=True)

    health_score: int = Field(..., alias="healthScore", ge=0, le=100)
    baseline: Optional[int] = None
    delta: Optional[int] = None
    grade: str
    city_scores: list[CityScoreItem] = Field(default_factory=list, alias="cityScores")
