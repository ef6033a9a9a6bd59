"""Pydantic schemas for user records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserInput(BaseModel):
    """Payload accepted by create and update.

    Omitted fields default to an empty string, so an update with a missing
    field clears it. Any ``id`` supplied by the client is ignored.
    """

    name: str = Field(default="", description="Display name of the user.")
    email: str = Field(default="", description="Contact email of the user.")


class User(BaseModel):
    """A stored user record. Instances are immutable."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Server-assigned identifier.")
    name: str = Field(default="", description="Display name of the user.")
    email: str = Field(default="", description="Contact email of the user.")
