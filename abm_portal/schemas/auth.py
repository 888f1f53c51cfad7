"""Schemas for the reviewer existence check."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from sqlmodel import SQLModel


class CheckUserResponse(SQLModel):
    """Outcome of looking a reviewer username up in the directory."""

    status: Literal["success", "error"] = Field(
        description="`success` when the username exists and is not deleted.",
        examples=["success"],
    )
    message: str = Field(examples=["User found"])
