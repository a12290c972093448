# schedconsole/api/envelope.py
"""Decoding of the service's JSON response envelope.

The backend wraps replies as ``{"success": bool, "data": ..., "error"|"message": ...}``
but token replies come in two shapes: nested (``data.token``) and flat
(``token`` at the top level). Both are normalized here into a ``TokenGrant``
so nothing past the client boundary has to care which one arrived.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

EnvelopeShape = Literal["nested", "flat"]


@dataclass(frozen=True)
class TokenGrant:
    token: str
    shape: EnvelopeShape


class Envelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    data: Any = None
    error: Any = None
    message: Any = None
    token: Any = None

    def token_grant(self) -> Optional[TokenGrant]:
        if not self.success:
            return None
        # any data object, even an empty one, makes this the nested shape
        if isinstance(self.data, (dict, list)) or self.data:
            token = self.data.get("token") if isinstance(self.data, dict) else None
            shape: EnvelopeShape = "nested"
        else:
            token = self.token
            shape = "flat"
        if isinstance(token, str) and token:
            return TokenGrant(token=token, shape=shape)
        return None

    def reason(self, fallback: str) -> str:
        for candidate in (self.error, self.message):
            if candidate:
                return str(candidate)
        return fallback


def decode_envelope(body: Any) -> Envelope:
    if not isinstance(body, dict):
        return Envelope()
    try:
        return Envelope.model_validate(body)
    except PydanticValidationError:
        return Envelope(
            error=body.get("error"),
            message=body.get("message"),
        )
