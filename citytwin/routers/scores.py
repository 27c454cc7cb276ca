"""Health snapshot and city score endpoints."""

from fastapi import APIRouter, Depends, Request

from citytwin.engine.scoring import (
    HealthScoreTracker,
    HealthState,
    attach_scores,
    compute_city_scores,
    compute_health_score,
    grade_for_score,
)
from citytwin.schemas.context import (
    HealthStateResponse,
    QueryContext,
    ScoreRequest,
    ScoreResponse,
)

router = APIRouter()


def get_health_tracker(request: Request) -> HealthScoreTracker:
    """The process-wide tracker owned by the application."""
    return request.app.state.health_tracker


def _state_response(state: HealthState) -> HealthStateResponse:
    return HealthStateResponse(
        current=state.current,
        baseline=state.baseline,
        delta=state.delta,
        grade=grade_for_score(state.current),
    )


@router.post("/scores", response_model=ScoreResponse)
async def compute_scores(
    request: ScoreRequest,
    tracker: HealthScoreTracker = Depends(get_health_tracker),
):
    """
    Score a layer snapshot.

    The first score since the last reset becomes the baseline that later
    scores are compared against.
    """
    score = compute_health_score(request.layers)
    state = tracker.update(score)
    return ScoreResponse(
        health_score=score,
        baseline=state.baseline,
        delta=state.delta,
        grade=grade_for_score(score),
        city_scores=compute_city_scores(request.persona),
    )


@router.get("/scores/baseline", response_model=HealthStateResponse)
async def get_baseline(tracker: HealthScoreTracker = Depends(get_health_tracker)):
    """Current score and baseline."""
    return _state_response(tracker.state)


@router.post("/scores/reset", response_model=HealthStateResponse)
async def reset_baseline(tracker: HealthScoreTracker = Depends(get_health_tracker)):
    """Forget the baseline; the next score re-seeds it."""
    return _state_response(tracker.reset())


@router.post("/context", response_model=QueryContext)
async def build_context(context: QueryContext):
    """Resolve the persona and fold scores into an assistant context."""
    return attach_scores(context)
