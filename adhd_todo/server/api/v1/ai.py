"""
AI text completion endpoints.

``/completions`` completes or rewrites task titles and descriptions with Google
Gemini. ``/advanced`` forwards a free-form prompt and can return parsed JSON;
it is off unless ``AI__FEATURES_ENABLED`` is set. Outside production both are
open; in production they require a login session.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from adhd_todo.core.errors import UnauthorizedError
from adhd_todo.core.models.io.ai import AdvancedRequest, CompletionRequest, CompletionResponse
from adhd_todo.server.core.config import settings
from adhd_todo.server.services.ai_completion import AICompletionService, get_ai_completion_service
from adhd_todo.server.services.deps import OptionalUserDep

router = APIRouter(tags=["ai"])


@router.post(
    "/completions",
    response_model=CompletionResponse,
    response_model_exclude_none=True,
    summary="Complete Task Text",
    description="Complete, improve, expand, shorten or rephrase task text, or suggest a related task.",
    response_description="Generated text; `complete` also returns the full text and whether it reads as finished.",
    responses={
        400: {"description": "Text is required, or invalid action"},
        401: {"description": "Login required (production only)"},
        502: {"description": "The AI provider failed or returned nothing"},
        503: {"description": "AI completion is not configured"},
    },
)
async def create_completion(
    data: CompletionRequest,
    user: OptionalUserDep,
    service: Annotated[AICompletionService, Depends(get_ai_completion_service)],
) -> CompletionResponse:
    """
    Generate task text.

    - **text**: The current title or description.
    - **field_type**: ``title`` or ``description``; titles get a shorter answer.
    - **action**: ``complete``, ``improve``, ``expand``, ``shorten``, ``professional`` or ``related``.
    - **model**: Optional Gemini model; unknown names use the configured default.

    Text containing ``[DIRECT RESPONSE ONLY]`` is sent to the model as-is and
    the answer is trimmed to a single clean line.
    """
    if settings.environment == "production" and user is None:
        raise UnauthorizedError()
    return await service.complete(data)


@router.post(
    "/advanced",
    summary="Advanced AI Request",
    description="Send a free-form prompt at low temperature; optionally parse the answer as JSON.",
    response_description='`{"text": ...}`, or the parsed JSON document when `responseFormat` is `json`.',
    responses={
        400: {"description": "Missing prompt or action"},
        401: {"description": "Login required (production only)"},
        403: {"description": "AI features are disabled"},
        502: {"description": "The AI provider failed or its JSON answer could not be read"},
        503: {"description": "AI completion is not configured"},
    },
)
async def create_advanced_completion(
    data: AdvancedRequest,
    user: OptionalUserDep,
    service: Annotated[AICompletionService, Depends(get_ai_completion_service)],
) -> Any:
    if settings.environment == "production" and user is None:
        raise UnauthorizedError()
    return await service.advanced(data)
