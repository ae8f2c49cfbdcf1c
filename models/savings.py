# models/savings.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Union, Optional


class SavingsTarget(BaseModel):
    amount: int = Field(..., gt=0, description="Total amount the user wants to save (JPY)")
    goal: str = Field(default="savings", description="What the user is saving for")
    created_at: datetime = Field(default_factory=datetime.now, description="When the target was set")
    target_date: Union[datetime, str] = Field(..., description="The date the goal should be reached")
    daily_target: int = Field(..., ge=0, description="Amount to put aside each day")

    @field_validator('target_date')
    @classmethod
    def validate_target_date(cls, v):
        if isinstance(v, str):
            from dateutil import parser
            return parser.parse(v)
        return v


class UserProfile(BaseModel):
    """Process-lifetime state of one chat user."""

    user_id: str
    targets: list[SavingsTarget] = Field(default_factory=list)
    total_saved: int = Field(default=0, ge=0)
    heir_address: Optional[str] = None
    family_group_id: Optional[str] = None

    @property
    def latest_target(self) -> Optional[SavingsTarget]:
        return self.targets[-1] if self.targets else None


class FamilyGroup(BaseModel):
    group_id: str
    name: str = Field(default="My Family")
    creator: str
    members: set[str] = Field(default_factory=set)
    savings_goal: int = Field(default=0, ge=0)
    total_saved: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
    heir_address: Optional[str] = None

    @property
    def progress_percent(self) -> int:
        if self.savings_goal <= 0:
            return 0
        return round(self.total_saved / self.savings_goal * 100)

    @property
    def remaining(self) -> int:
        return max(0, self.savings_goal - self.total_saved)
