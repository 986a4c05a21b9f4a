"""CrudSettings: behaviour switches for the CRUD helpers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CrudSettings(BaseModel):
    """
    Immutable configuration shared by a repository's operations.

    Passed explicitly to :class:`CrudRepository`; nothing is read from
    the environment.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    locale: str = Field(
        default="en",
        pattern=r"^[A-Za-z]{2,3}([_-][A-Za-z0-9]+)*$",
        description="Locale used to render notification messages",
    )
    flash: bool = Field(
        default=True,
        description="Emit notifications unless a call passes flash=False",
    )
    deleted_at_column: str = Field(
        default="deleted_at",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Soft-delete timestamp column",
    )
    strict_operators: bool = Field(
        default=True,
        description="Raise on unknown where-map operators instead of skipping them",
    )
