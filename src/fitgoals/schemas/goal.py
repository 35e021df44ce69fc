"""Pydantic schemas for goals.

Learn: the wire format is camelCase (startDate, targetValue, userId) via an
alias generator; populate_by_name also accepts snake_case on input.
Separate "Create"/"Update" schemas (input) from "Read" (output).
"""

import uuid
from datetime import datetime, timezone
from typing import Annotated, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

GoalType = Literal["weight loss", "muscle gain", "endurance", "other"]

NAME_MIN = 3
NAME_MAX = 50
DESCRIPTION_MAX = 200
UNIT_MAX = 30


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are UTC (SQLite drops the offset); aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class ProgressEntry(CamelModel):
    date: UtcDatetime
    value: float = Field(..., allow_inf_nan=False)


class GoalFields(CamelModel):
    """Fields shared by create and update payloads."""

    name: str
    description: Optional[str] = None
    type: GoalType
    start_date: UtcDatetime
    end_date: UtcDatetime
    target_value: float = Field(..., allow_inf_nan=False)
    unit: str = Field(..., min_length=1, max_length=UNIT_MAX)

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < NAME_MIN:
            raise ValueError(f"Goal name must be at least {NAME_MIN} characters long.")
        if len(v) > NAME_MAX:
            raise ValueError(f"Goal name cannot exceed {NAME_MAX} characters.")
        return v

    @field_validator("description")
    @classmethod
    def description_length(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if len(v) > DESCRIPTION_MAX:
            raise ValueError(
                f"Goal description cannot exceed {DESCRIPTION_MAX} characters."
            )
        return v or None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        # "weight-loss" and "Weight Loss" both mean "weight loss"
        if isinstance(v, str):
            return v.strip().lower().replace("-", " ").replace("_", " ")
        return v

    @field_validator("unit")
    @classmethod
    def unit_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Unit of measure is required.")
        return v


class GoalCreate(GoalFields):
    progress: list[ProgressEntry] = Field(default_factory=list)


class GoalUpdate(GoalFields):
    """Full replacement of a goal's fields. Progress is kept when omitted."""
    progress: Optional[list[ProgressEntry]] = None


class GoalRead(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str] = None
    type: str
    start_date: UtcDatetime
    end_date: UtcDatetime
    target_value: float
    unit: str
    progress: list[ProgressEntry] = []
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @computed_field(alias="progressPercent")
    @property
    def progress_percent(self) -> float:
        """Latest progress value as a percentage of the target, clamped to 0..100."""
        if not self.progress or self.target_value == 0:
            return 0.0
        pct = self.progress[-1].value * 100 / self.target_value
        return round(min(max(pct, 0.0), 100.0), 2)
