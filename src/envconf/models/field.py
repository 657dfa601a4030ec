"""Field descriptor model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FieldDescriptor(BaseModel):
    """Environment binding for one settable field of a record.

    Built fresh by ``process()`` on every load and discarded afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Attribute name in the record.")
    env: str = Field(..., min_length=1, description="Environment variable to query.")
    default: str = Field(
        default="",
        description="Textual default. Only meaningful when has_default is set.",
    )
    has_default: bool = Field(
        default=False,
        description="True when the default tag is present, even if empty.",
    )
    required: bool = Field(default=False)
