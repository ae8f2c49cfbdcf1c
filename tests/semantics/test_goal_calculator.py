from datetime import date, datetime, timedelta

import pytest

from core.errors import InvalidTimeline
from services.goal_calculator import calculate_goal, days_until, parse_target_date


NOW = datetime(2026, 12, 1)


# ---------------------------------------------------------------------
# TESTS: DAY COUNTS
# ---------------------------------------------------------------------

def test_day_count_splits_amount_evenly():
    plan = calculate_goal(10000, 10, now=NOW)

    assert plan.days_remaining == 10
    assert plan.daily_target == 1000
    assert plan.target_date == NOW + timedelta(days=10)
    assert plan.expired is False


def test_daily_target_rounds_up():
    """
    ¥10000 over 3 days must never fall short: 3334, not 3333.
    """
    plan = calculate_goal(10000, 3, now=NOW)

    assert plan.daily_target == 3334
    assert plan.daily_target * plan.days_remaining >= 10000


def test_zero_days_asks_for_everything_today():
    plan = calculate_goal(5000, 0, now=NOW)

    assert plan.days_remaining == 0
    assert plan.daily_target == 5000
    assert plan.expired is True


# ---------------------------------------------------------------------
# TESTS: CALENDAR DATES
# ---------------------------------------------------------------------

def test_iso_date_string():
    plan = calculate_goal(30000, "2026-12-31", now=NOW)

    assert plan.days_remaining == 30
    assert plan.daily_target == 1000
    assert plan.target_date.date() == date(2026, 12, 31)


def test_date_object():
    plan = calculate_goal(30000, date(2026, 12, 31), now=NOW)

    assert plan.days_remaining == 30


def test_partial_day_is_rounded_up():
    plan = calculate_goal(3000, datetime(2026, 12, 31), now=datetime(2026, 12, 1, 12, 0))

    # 29.5 days left
    assert plan.days_remaining == 30
    assert plan.daily_target == 100


def test_past_date_reports_negative_days_and_full_amount():
    plan = calculate_goal(5000, datetime(2026, 11, 21), now=NOW)

    assert plan.days_remaining == -10
    assert plan.daily_target == 5000
    assert plan.expired is True


# ---------------------------------------------------------------------
# TESTS: INVALID TIMELINES
# ---------------------------------------------------------------------

@pytest.mark.parametrize("timeline", ["xyzzy", "", "   ", None, True, 1.5])
def test_invalid_timeline_raises(timeline):
    with pytest.raises(InvalidTimeline) as exc:
        calculate_goal(1000, timeline, now=NOW)

    assert exc.value.status_code == 422
    assert exc.value.error_type == "invalid_timeline"


def test_parse_target_date_rejects_garbage():
    with pytest.raises(InvalidTimeline):
        parse_target_date("xyzzy", now=NOW)


def test_days_until_counts_partial_days():
    assert days_until(datetime(2026, 12, 3), now=datetime(2026, 12, 1, 6, 0)) == 2


def test_thirty_thousand_over_thirty_days():
    plan = calculate_goal(30000, 30, now=NOW)

    assert plan.daily_target == 1000
    assert plan.target_date - NOW == timedelta(days=30)


def test_date_without_year_resolves_to_next_occurrence():
    this_year = calculate_goal(3000, "December 31", now=NOW)
    next_year = calculate_goal(3000, "December 31", now=datetime(2027, 1, 15))

    assert this_year.target_date.date() == date(2026, 12, 31)
    assert this_year.days_remaining == 30
    assert next_year.target_date.date() == date(2027, 12, 31)
    assert next_year.expired is False
