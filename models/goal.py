# FILE: models/goal.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


# -----------------------------
# Goal Plan (Calculator → Executors / API)
# -----------------------------
class GoalPlan(BaseModel):
    amount: int
    # Unclamped: zero or negative once the target date has passed
    days_remaining: int
    daily_target: int
    target_date: datetime

    @property
    def expired(self) -> bool:
        return self.days_remaining <= 0


# -----------------------------
# Goal Request (API → Calculator)
# -----------------------------
class GoalRequest(BaseModel):
    amount: int = Field(..., gt=0)
    timeline_days: Optional[int] = Field(None, description="Number of days to reach the goal")
    target_date: Optional[str] = Field(None, description="Calendar date to reach the goal")

    @model_validator(mode="after")
    def one_timeline(self):
        if (self.timeline_days is None) == (self.target_date is None):
            raise ValueError("Provide exactly one of timeline_days or target_date")
        return self

    @property
    def timeline(self):
        return self.target_date if self.target_date is not None else self.timeline_days
