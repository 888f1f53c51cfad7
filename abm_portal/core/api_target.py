"""Shared API-target enum values."""

from __future__ import annotations

from enum import Enum


class ApiTarget(str, Enum):
    """Backends the reviewer client can talk to."""

    LOCAL = "local"
    WORKFLOW = "workflow"
