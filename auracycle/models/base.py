"""Shared Pydantic base model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AuraBase(BaseModel):
    """Base model with shared config for all AuraCycle schemas.

    Input records are frozen: the engine reads them but never edits them.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )
