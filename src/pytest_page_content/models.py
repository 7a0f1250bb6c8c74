"""Base Pydantic models for chain operations and settings.

This module defines the foundational model classes used by queued
actions, expectations and runtime settings. Operation models are
immutable so that a queued operation can not change between the moment
it is declared and the moment it runs.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all chain operations.

    Design principles enforced by this model:
        - Immutability: operations can not be modified after they are
          appended to a chain.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings can not be modified after creation.
        - Tolerant schema handling: unrelated environment variables are ignored.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
