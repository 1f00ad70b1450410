"""
Chat API - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Missing fields are not errors: the gateway applies defaults.
Scalar values (numbers, booleans) are forwarded as their text form.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def _scalar_as_text(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class ChatRequest(BaseModel):
    """Inbound payload for POST /api/chat."""

    message: Optional[str] = Field(
        default=None,
        description="User message. Not pre-validated; empty is forwarded as-is."
    )
    context: Optional[str] = Field(
        default=None,
        description="Persona tag (e.g. 'tax', 'prepayment'). Unknown → default persona."
    )

    @field_validator("message", "context", mode="before")
    @classmethod
    def coerce_scalars(cls, value: Any) -> Any:
        return _scalar_as_text(value)


class ChatResponse(BaseModel):
    """Reply returned to the widget, on success and on failure alike."""

    reply: str = Field(..., description="Generated reply or the fixed apology")
