"""Structured error payload schemas used by API responses."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel


class ErrorResponse(SQLModel):
    """Error envelope produced by the installed exception handlers."""

    detail: str | dict[str, object] | list[object] = Field(
        description="Human-readable message, or a list of field errors for 422 responses.",
        examples=["Username is required", "Failed to fetch requests"],
    )
    request_id: str | None = Field(
        default=None,
        description="Request correlation identifier injected by middleware.",
    )
