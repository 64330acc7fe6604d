"""
Date resolution endpoint.

POST /parse-fecha
    Body: {"referencia": ISO 8601, "expresion_usuario": str, "zona_horaria": IANA id (optional)}

    200 → resolved fields, or "sin_definir" fields for greetings
    200 → {"error": true, "mensaje": ...} plus sentinel fields when nothing could be resolved
    400 → {"error": true, "mensaje": ...} for missing/invalid parameters
    500 → {"error": true, "mensaje": <exception message>}
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from agent.temporal import (
    InvalidRequestError,
    Policy,
    ResolutionRequest,
    TemporalResolver,
    assemble,
    get_llm_client,
)
from api.models.parse_fecha import ErrorResponse, ParseFechaRequest, ParseFechaResponse
from shared.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def get_resolver() -> TemporalResolver:
    """Process-wide resolver: frozen policy plus the shared model client."""
    settings = get_settings()
    return TemporalResolver(
        policy=Policy.from_settings(settings),
        llm=get_llm_client(),
        llm_timeout=settings.LLM_TIMEOUT_SECONDS,
    )


@router.post(
    "/parse-fecha",
    responses={
        200: {"model": ParseFechaResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def parse_fecha(
    body: ParseFechaRequest,
    resolver: TemporalResolver = Depends(get_resolver),
) -> JSONResponse:
    """Resolve a Spanish/Catalan temporal expression against a reference instant."""
    try:
        request = ResolutionRequest.from_raw(
            body.referencia, body.expresion_usuario, body.zona_horaria
        )
    except InvalidRequestError as e:
        logger.info(f"Rejected /parse-fecha request: {e}", extra={"request_path": "/parse-fecha"})
        return JSONResponse(status_code=400, content={"error": True, "mensaje": str(e)})

    try:
        outcome = await resolver.resolve(request)
        content = assemble(outcome, request.reference)
    except Exception as e:
        logger.error(
            f"Unexpected error resolving '{request.expression}': {e}",
            exc_info=True,
            extra={"request_path": "/parse-fecha"},
        )
        return JSONResponse(status_code=500, content={"error": True, "mensaje": str(e)})

    logger.info(
        f"Resolved '{request.expression}' → {content.get('iso_datetime')}",
        extra={"request_path": "/parse-fecha"},
    )
    return JSONResponse(status_code=200, content=content)
