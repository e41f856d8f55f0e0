"""
Trip API schemas (request models).
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TripCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Presence is checked in the service so a missing title is a plain 400.
    title: str | None = Field(default=None, max_length=500)
    start_date: date | None = Field(default=None, alias="startDate")
    end_date: date | None = Field(default=None, alias="endDate")
    timezone: str | None = Field(default=None, max_length=100)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def blank_date_is_null(cls, v):
        """Form clients send "" for an unset date."""
        if isinstance(v, str) and not v.strip():
            return None
        return v
