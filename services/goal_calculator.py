"""
Goal Calculator Service

- Turns {amount, timeline} into days remaining, a daily target and a target date
- A timeline is either a day count or a calendar date (string, date or datetime)
- Unparseable timelines raise InvalidTimeline instead of leaking NaN-like values
"""

import math
from datetime import date, datetime, timedelta
from typing import Optional, Union

import dateparser

from core.errors import InvalidTimeline
from models.goal import GoalPlan

Timeline = Union[int, str, date, datetime]

_DAY = timedelta(days=1)


def get_now() -> datetime:
    """Return the current local time (system clock)."""
    return datetime.now()


def parse_target_date(value: str, now: Optional[datetime] = None) -> datetime:
    """
    Parse a calendar date written in English or Japanese
    ("2026-12-31", "2026年12月31日", "Dec 31 2026").
    """
    now = now or get_now()
    parsed = dateparser.parse(
        value.strip(),
        settings={
            "PREFER_DATES_FROM": "future",
            "RELATIVE_BASE": now,
            "RETURN_AS_TIMEZONE_AWARE": False,
        },
    )
    if parsed is None:
        raise InvalidTimeline(value)
    return parsed


def _resolve_target(timeline: Timeline, now: datetime) -> tuple[int, datetime]:
    # bool is an int subclass; True is not "one day"
    if isinstance(timeline, bool):
        raise InvalidTimeline(timeline)

    if isinstance(timeline, int):
        return timeline, now + timeline * _DAY

    if isinstance(timeline, datetime):
        target = timeline
    elif isinstance(timeline, date):
        target = datetime.combine(timeline, datetime.min.time())
    elif isinstance(timeline, str) and timeline.strip():
        target = parse_target_date(timeline, now)
    else:
        raise InvalidTimeline(timeline)

    return math.ceil((target - now) / _DAY), target


def calculate_goal(
    amount: int,
    timeline: Timeline,
    now: Optional[datetime] = None,
) -> GoalPlan:
    """
    Compute the plan for saving ``amount`` over ``timeline``.

    days_remaining is reported as-is (zero or negative for a past date);
    only the divisor used for daily_target is clamped to at least one day.
    """
    now = now or get_now()
    days_remaining, target_date = _resolve_target(timeline, now)
    daily_target = math.ceil(amount / max(days_remaining, 1))

    return GoalPlan(
        amount=amount,
        days_remaining=days_remaining,
        daily_target=daily_target,
        target_date=target_date,
    )


def days_until(target_date: datetime, now: Optional[datetime] = None) -> int:
    now = now or get_now()
    return math.ceil((target_date - now) / _DAY)
