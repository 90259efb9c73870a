"""Resources shared by every endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class HorizonError(BaseModel):
    """
    Problem document returned by the server with 4xx responses.

    Unknown fields are preserved so that endpoint-specific details survive a
    decode/encode cycle.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    extras: dict[str, Any] | None = None
