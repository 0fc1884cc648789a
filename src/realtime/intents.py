"""
Farkle Engine - Inbound Intents

One pydantic model per participant action, discriminated on `kind`.
Anything that does not validate is rejected here, before it reaches a
session.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from src.engine.base import GameMode
from src.engine.errors import InvalidIntentError
from src.engine.validators import MAX_NICKNAME_LENGTH


class _IntentBase(BaseModel):
    actor_id: str = Field(min_length=1)

    model_config = {"frozen": True, "extra": "forbid"}


class JoinIntent(_IntentBase):
    kind: Literal["join"] = "join"
    nickname: str = Field(min_length=1, max_length=MAX_NICKNAME_LENGTH)
    avatar: str | None = None
    code: str | None = None


class SoloIntent(_IntentBase):
    kind: Literal["solo"] = "solo"
    nickname: str = Field(min_length=1, max_length=MAX_NICKNAME_LENGTH)
    avatar: str | None = None
    mode: GameMode | None = None


class StartIntent(_IntentBase):
    kind: Literal["start"] = "start"
    mode: GameMode | None = None


class RestartIntent(_IntentBase):
    kind: Literal["restart"] = "restart"
    mode: GameMode | None = None


class RollIntent(_IntentBase):
    kind: Literal["roll"] = "roll"


class SelectIntent(_IntentBase):
    kind: Literal["select"] = "select"
    die_id: int = Field(ge=0)
    held: bool | None = None


class KeepIntent(_IntentBase):
    kind: Literal["keep"] = "keep"


class BankIntent(_IntentBase):
    kind: Literal["bank"] = "bank"


class AcknowledgeFarkleIntent(_IntentBase):
    kind: Literal["acknowledgeFarkle"] = "acknowledgeFarkle"


class LeaveIntent(_IntentBase):
    kind: Literal["leave"] = "leave"


Intent = Annotated[
    Union[
        JoinIntent,
        SoloIntent,
        StartIntent,
        RestartIntent,
        RollIntent,
        SelectIntent,
        KeepIntent,
        BankIntent,
        AcknowledgeFarkleIntent,
        LeaveIntent,
    ],
    Field(discriminator="kind"),
]

_INTENT_ADAPTER: TypeAdapter[Intent] = TypeAdapter(Intent)

INTENT_KINDS = (
    "join", "solo", "start", "restart", "roll", "select", "keep", "bank",
    "acknowledgeFarkle", "leave",
)


def parse_intent(data: Mapping[str, Any]) -> Intent:
    """
    Validate a raw intent mapping.

    Raises:
        InvalidIntentError: Unknown kind, missing actor, or bad payload
    """
    try:
        return _INTENT_ADAPTER.validate_python(dict(data))
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'intent'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidIntentError(f"Invalid intent: {errors}") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidIntentError(f"Invalid intent: {exc}") from exc
