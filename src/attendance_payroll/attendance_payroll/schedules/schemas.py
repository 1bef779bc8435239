from __future__ import annotations

from datetime import time

from pydantic import BaseModel, ConfigDict, Field


class ScheduleQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int = Field(ge=1)


class ScheduleUpsertRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int = Field(ge=1)
    day_of_week: int = Field(ge=0, le=6, description="Monday=0 ... Sunday=6")
    start_time: time
    end_time: time
    break_minutes: int = Field(default=0, ge=0, le=720)


class ScheduleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    schedule_id: int
    employee_id: int
    day_of_week: int
    start_time: time
    end_time: time
    break_minutes: int
