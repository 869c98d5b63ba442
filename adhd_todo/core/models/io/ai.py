"""
AI completion I/O models.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CompletionRequest(BaseModel):
    """Text to complete or rewrite.

    ``action`` is validated by the completion service so an unknown action is
    reported as ``400 Invalid action``.
    """

    text: str = ""
    field_type: Literal["title", "description"] = "title"
    action: str = "complete"
    model: Optional[str] = Field(default=None, description="Gemini model name; unknown names use the default")


class CompletionResponse(BaseModel):
    """``full_text`` and ``is_complete`` are only set for the ``complete`` action."""

    text: str
    full_text: Optional[str] = None
    is_complete: Optional[bool] = None


class AdvancedRequest(BaseModel):
    """Free-form prompt for the advanced endpoint.

    ``prompt`` and ``action`` are checked by the service so a missing value is
    reported as ``400 Missing prompt`` or ``400 Missing action``.
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = ""
    action: str = ""
    model: Optional[str] = Field(default=None, description="Gemini model name; unknown names use gemini-2.0-pro")
    response_format: Optional[str] = Field(
        default=None, alias="responseFormat", description='"json" parses the answer as a JSON document'
    )
