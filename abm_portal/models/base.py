"""Shared base class for store table contracts."""

from __future__ import annotations

from sqlmodel import SQLModel


class StoreModel(SQLModel):
    """Base for tables owned by the upstream store.

    Column names mirror the store exactly (camelCase included) so rows can be
    returned to clients without renaming.
    """
