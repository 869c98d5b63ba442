"""
AI text completion service.

Wraps Google Gemini through pydantic-ai to complete or rewrite task titles and
descriptions. Each action maps to a fixed prompt; text tagged with
``[DIRECT RESPONSE ONLY]`` is sent as-is and its answer is stripped down to a
single clean line.
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Optional

from pydantic_ai import Agent, ModelSettings
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from adhd_todo.core.errors import ForbiddenError, ServiceUnavailableError, UpstreamError, ValidationFailedError
from adhd_todo.core.models.io.ai import AdvancedRequest, CompletionRequest, CompletionResponse
from adhd_todo.core.monitoring import log_ai_completion
from adhd_todo.server.core.config import settings

logger = logging.getLogger(__name__)

DIRECT_RESPONSE_MARKER = "[DIRECT RESPONSE ONLY]"

GEMINI_MODELS = (
    "gemini-2.0-flash-lite",
    "gemini-2.0-pro",
    "gemini-pro",
    "gemini-1.5-flash",
)

PROMPTS = {
    "improve": 'Improve this task text to be clearer and more effective: "{text}"',
    "expand": 'Expand this task text with more helpful details: "{text}"',
    "shorten": 'Make this task text more concise while keeping the meaning: "{text}"',
    "professional": 'Rewrite this task text in a more professional tone: "{text}"',
    "related": 'Based on this task: "{text}", suggest one related task that might be needed.',
}
COMPLETE_TITLE_PROMPT = 'Complete this task title in a concise and actionable way: "{text}"'
COMPLETE_DESCRIPTION_PROMPT = 'Complete this task description with helpful details: "{text}"'
ACTIONS = frozenset(PROMPTS) | {"complete"}

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")
_EXPLANATORY_PHRASES = (
    re.compile(
        r"^(here are|here's|I would|I've|I'd|I will|I can|I'm going to|to improve|I'll|for this task)[^.]*",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(the improved|improved|better|enhanced|more concise|more professional|expanded) "
        r"(version|text|description|task)[^.]*",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(a|the) (good|better|improved|professional|concise|detailed) (description|version|text) "
        r"(is|would be|could be)[^.]*",
        re.IGNORECASE,
    ),
)
_STEP_PREFIX = re.compile(r"^Step \d+:\s*", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

ADVANCED_MODEL_SETTINGS = ModelSettings(temperature=0.1, top_p=0.9)


def build_prompt(text: str, action: str, field_type: str) -> str:
    """Prompt sent to the model for an action."""
    if DIRECT_RESPONSE_MARKER in text:
        return text
    if action == "complete":
        template = COMPLETE_TITLE_PROMPT if field_type == "title" else COMPLETE_DESCRIPTION_PROMPT
    else:
        template = PROMPTS[action]
    return template.format(text=text)


def build_model_settings(text: str, action: str, field_type: str) -> ModelSettings:
    """Sampling settings: lower temperature for direct prompts, short output for titles."""
    if DIRECT_RESPONSE_MARKER in text:
        temperature = 0.3
    elif action == "related":
        temperature = 0.8
    else:
        temperature = 0.7
    max_tokens = 30 if action == "complete" and field_type == "title" else 150
    return ModelSettings(temperature=temperature, top_p=0.95, max_tokens=max_tokens)


def clean_direct_response(completion: str) -> str:
    """Keep the first line, then strip quotes, lead-in chatter and step prefixes."""
    completion = completion.strip().split("\n")[0].strip()
    completion = _SURROUNDING_QUOTES.sub("", completion).strip()
    for phrase in _EXPLANATORY_PHRASES:
        completion = phrase.sub("", completion).strip()
    completion = _STEP_PREFIX.sub("", completion)
    return _SURROUNDING_QUOTES.sub("", completion).strip()


def format_completion(text: str, completion: str, action: str) -> CompletionResponse:
    """Shape the model output for the client.

    ``complete`` returns only the part to append when the model echoed the
    input back, plus the full text and whether it reads as a finished sentence.
    """
    if action != "complete":
        return CompletionResponse(text=completion)
    if completion.lower().startswith(text.lower()):
        suggestion = completion[len(text) :]
    else:
        suggestion = completion
    return CompletionResponse(
        text=suggestion,
        full_text=completion,
        is_complete=completion.endswith(".") or completion.endswith("!"),
    )


def parse_json_output(text: str) -> Any:
    """Read a JSON answer, falling back to the outermost object embedded in prose."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse AI response as JSON: {e}")
    match = _JSON_OBJECT.search(text)
    if match is None:
        raise UpstreamError("Invalid JSON in AI response")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise UpstreamError("Failed to parse AI response as JSON") from e


def _is_model_not_found(error: Exception) -> bool:
    if isinstance(error, ModelHTTPError) and error.status_code == 404:
        return True
    return "not found" in str(error).lower()


class AICompletionService:
    """Generate task text with Gemini."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        features_enabled: Optional[bool] = None,
    ):
        if api_key is None and settings.ai.api_key is not None:
            api_key = settings.ai.api_key.get_secret_value()
        self.api_key = api_key
        self.default_model = default_model or settings.ai.model
        self.fallback_model = fallback_model or settings.ai.fallback_model
        self.features_enabled = settings.ai.features_enabled if features_enabled is None else features_enabled
        self.advanced_model = settings.ai.advanced_model

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != "YOUR_GEMINI_API_KEY_HERE"

    def resolve_model_name(self, requested: Optional[str]) -> str:
        """Requested model when it is a known Gemini model, the default otherwise."""
        if requested and requested in GEMINI_MODELS:
            return requested
        return self.default_model

    def _build_model(self, model_name: str) -> GoogleModel:
        return GoogleModel(model_name, provider=GoogleProvider(api_key=self.api_key))

    async def _generate(self, model_name: str, prompt: str, model_settings: ModelSettings) -> str:
        agent: Agent = Agent(self._build_model(model_name))
        result = await agent.run(prompt, model_settings=model_settings)
        return (result.output or "").strip()

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Run one completion request.

        Raises:
            ValidationFailedError: empty text or unknown action
            ServiceUnavailableError: no API key configured
            UpstreamError: the provider failed or returned nothing
        """
        if not request.text or not request.text.strip():
            raise ValidationFailedError("Text is required")
        if request.action not in ACTIONS:
            raise ValidationFailedError("Invalid action")
        if not self.is_configured:
            raise ServiceUnavailableError("AI completion is not configured")

        model_name = self.resolve_model_name(request.model)
        prompt = build_prompt(request.text, request.action, request.field_type)
        model_settings = build_model_settings(request.text, request.action, request.field_type)
        logger.info(f"Using Gemini model: {model_name} (action={request.action})")

        start = time.time()
        try:
            completion = await self._generate(model_name, prompt, model_settings)
        except Exception as e:
            if model_name == self.fallback_model or not _is_model_not_found(e):
                log_ai_completion(request.action, model_name, (time.time() - start) * 1000, success=False)
                logger.error(f"Error generating content with Gemini model {model_name}: {e}")
                raise UpstreamError(f"Gemini API error: {e}") from e
            logger.info(f"Model {model_name} not found, falling back to {self.fallback_model}")
            model_name = self.fallback_model
            try:
                completion = await self._generate(model_name, prompt, model_settings)
            except Exception as fallback_error:
                log_ai_completion(request.action, model_name, (time.time() - start) * 1000, success=False)
                logger.error(f"Fallback model also failed: {fallback_error}")
                raise UpstreamError(f"Gemini API error: {fallback_error}") from fallback_error

        log_ai_completion(request.action, model_name, (time.time() - start) * 1000, success=bool(completion))
        if not completion:
            raise UpstreamError("No completion generated")

        if DIRECT_RESPONSE_MARKER in request.text:
            completion = clean_direct_response(completion)
        return format_completion(request.text, completion, request.action)

    async def advanced(self, request: AdvancedRequest) -> Any:
        """
        Run a free-form prompt with near-deterministic sampling.

        Returns:
            ``{"text": ...}``, or the parsed document when ``response_format`` is ``json``

        Raises:
            ForbiddenError: AI features are turned off
            ValidationFailedError: missing prompt or action
            ServiceUnavailableError: no API key configured
            UpstreamError: the provider failed or the JSON answer could not be read
        """
        if not self.features_enabled:
            raise ForbiddenError("AI features are disabled")
        if not request.prompt:
            raise ValidationFailedError("Missing prompt")
        if not request.action:
            raise ValidationFailedError("Missing action")
        if not self.is_configured:
            raise ServiceUnavailableError("AI completion is not configured")

        model_name = request.model if request.model in GEMINI_MODELS else self.advanced_model
        logger.info(f"Advanced AI request: action={request.action}, model={model_name}")

        start = time.time()
        try:
            generated = await self._generate(model_name, request.prompt, ADVANCED_MODEL_SETTINGS)
        except Exception as e:
            log_ai_completion(request.action, model_name, (time.time() - start) * 1000, success=False)
            logger.error(f"Advanced AI request failed with model {model_name}: {e}")
            raise UpstreamError(f"Gemini API error: {e}") from e
        log_ai_completion(request.action, model_name, (time.time() - start) * 1000, success=True)

        if request.response_format == "json":
            return parse_json_output(generated)
        return {"text": generated}


def get_ai_completion_service() -> AICompletionService:
    """FastAPI dependency building the service from settings."""
    return AICompletionService()
