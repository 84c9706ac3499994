"""Effect payloads that the model can request.

The same closed set of payloads is accepted from live tool calls and from
``exec`` fenced blocks in the finished answer text.
"""

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from hibiki.domain.exceptions import EffectValidationError


class AutoReplyPayload(BaseModel):
    """Register a regex-triggered auto-reply."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["auto_reply"] = "auto_reply"
    when: str = Field(
        strict=True, description="Regular expression matched against messages"
    )
    message: str = Field(strict=True, description="Reply template")


class ReplyAfterPayload(BaseModel):
    """Send a message once after a delay."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["reply_after"] = "reply_after"
    timeout: float = Field(
        ge=1, strict=True, allow_inf_nan=False, description="Delay in milliseconds"
    )
    message: str = Field(strict=True, description="Reply template")


class RememberPayload(BaseModel):
    """Store a note for this chat."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["remember"] = "remember"
    message: str = Field(strict=True, description="Note to remember")


EffectPayload = Annotated[
    Union[AutoReplyPayload, ReplyAfterPayload, RememberPayload],
    Field(discriminator="kind"),
]

_PAYLOAD_ADAPTER: TypeAdapter[Any] = TypeAdapter(EffectPayload)


def _format_errors(error: PydanticValidationError) -> str:
    """pydantic のエラーを 1 行ずつの説明に整形する"""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "(root)"
        lines.append(f"{location}: {item['msg']}")
    return "; ".join(lines)


def parse_effect_payload(
    raw: str | dict[str, Any],
) -> AutoReplyPayload | ReplyAfterPayload | RememberPayload:
    """Validate a raw payload against the effect schemas.

    Args:
        raw: JSON text (exec block) or an already-decoded mapping (tool call).

    Returns:
        The validated payload.

    Raises:
        EffectValidationError: If the JSON is malformed, the kind is unknown,
            or any field violates its schema.
    """
    raw_text = raw if isinstance(raw, str) else json.dumps(raw, ensure_ascii=False)

    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise EffectValidationError(raw_text, f"invalid JSON: {e.msg}") from e
    else:
        data = raw

    try:
        return _PAYLOAD_ADAPTER.validate_python(data)
    except PydanticValidationError as e:
        raise EffectValidationError(raw_text, _format_errors(e)) from e


class EffectOutcome(BaseModel):
    """Result of one attempted effect.

    Attributes:
        kind: Effect kind when the payload was valid, otherwise None.
        ok: Whether the effect was registered.
        summary: Human-readable acknowledgement or error.
        raw: The raw payload as received.
    """

    model_config = ConfigDict(frozen=True)

    kind: str | None
    ok: bool
    summary: str
    raw: str = ""
