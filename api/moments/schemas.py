"""
Moment API schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MomentCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    story: str | None = None
    location_name: str | None = Field(default=None, alias="locationName", max_length=500)
    moment_time: datetime | None = Field(default=None, alias="momentTime")
