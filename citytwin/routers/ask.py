"""Assistant question endpoint."""

from fastapi import APIRouter, Request

from citytwin.engine.answers import respond
from citytwin.engine.scoring import attach_scores
from citytwin.logging_config import get_logger
from citytwin.schemas.context import AskRequest, AskResponse

logger = get_logger('assistant')

router = APIRouter()

MISSING_INPUT_ANSWER = "Missing question or context."


@router.post("/ask", response_model=AskResponse)
async def ask(request: Request) -> AskResponse:
    """
    Answer a question about the current layers.

    Always responds 200. A missing question or context gets a fixed reply;
    any failure, including a body that does not parse, is reported in the
    answer text.
    """
    try:
        payload = await request.json()
        body = AskRequest.model_validate(payload)

        if not body.question or body.context is None:
            logger.info("✗ ASK_MISSING_INPUT")
            return AskResponse(answer=MISSING_INPUT_ANSWER)

        context = attach_scores(body.context)
        return AskResponse(answer=respond(body.question, context))

    except Exception as e:
        logger.exception(f"✗ ASK_FAILED | error={e}")
        return AskResponse(answer=f"Server error: {e}")
