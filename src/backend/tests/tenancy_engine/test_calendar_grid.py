from datetime import date

import pytest

from common.tenancy_engine.calendar_grid import DueDateGrid, clamp_day
from common.tenancy_engine.errors import CalendarConvergenceError, InvalidSchedule
from common.tenancy_engine.models import Frequency


def test_first_due_date_weekly_rolls_forward_to_anchor_weekday():
    grid = DueDateGrid("Weekly", "Wednesday")
    assert grid.first_due_date(date(2025, 1, 6)) == date(2025, 1, 8)


def test_matching_start_date_is_cycle_one():
    grid = DueDateGrid("Weekly", "Wednesday")
    assert grid.first_due_date(date(2025, 1, 8)) == date(2025, 1, 8)
    assert grid.due_date_for_cycle(1, date(2025, 1, 8)) == date(2025, 1, 8)


def test_monthly_anchor_clamps_and_recovers_after_short_month():
    grid = DueDateGrid("Monthly", 31)
    first = grid.first_due_date(date(2025, 1, 1))
    assert first == date(2025, 1, 31)
    second = grid.advance(first)
    assert second == date(2025, 2, 28)
    assert grid.advance(second) == date(2025, 3, 31)


def test_monthly_anchor_after_start_day_moves_to_next_month():
    grid = DueDateGrid("Monthly", 10)
    assert grid.first_due_date(date(2025, 1, 15)) == date(2025, 2, 10)


def test_monthly_anchor_in_leap_february():
    grid = DueDateGrid("Monthly", 30)
    first = grid.first_due_date(date(2024, 2, 1))
    assert first == date(2024, 2, 29)
    assert grid.advance(first) == date(2024, 3, 30)


def test_fortnightly_advances_fourteen_days():
    grid = DueDateGrid("Fortnightly", "Friday")
    first = grid.first_due_date(date(2025, 1, 6))
    assert first == date(2025, 1, 10)
    assert grid.advance(first) == date(2025, 1, 24)


def test_count_cycles_is_inclusive_at_both_ends():
    grid = DueDateGrid("Monthly", 31)
    assert grid.count_cycles(date(2025, 1, 31), date(2025, 3, 15)) == 2
    assert grid.count_cycles(date(2025, 1, 31), date(2025, 3, 31)) == 3
    assert grid.count_cycles(date(2025, 3, 1), date(2025, 2, 1)) == 0


def test_due_date_for_cycle_and_next_due_date_after():
    grid = DueDateGrid("Weekly", "Wednesday")
    assert grid.due_date_for_cycle(3, date(2025, 1, 6)) == date(2025, 1, 22)
    assert grid.next_due_date_after(date(2025, 1, 8)) == date(2025, 1, 15)
    assert grid.next_due_date_after(date(2025, 1, 9)) == date(2025, 1, 15)


def test_due_date_for_cycle_rejects_non_positive_cycles():
    grid = DueDateGrid("Weekly", "Wednesday")
    with pytest.raises(ValueError):
        grid.due_date_for_cycle(0, date(2025, 1, 6))


def test_cycles_are_numbered_from_ground_zero():
    grid = DueDateGrid("Weekly", "Wednesday")
    cycles = list(grid.cycles(date(2025, 1, 6), date(2025, 1, 22)))
    assert [c.cycle_number for c in cycles] == [1, 2, 3]
    assert [c.due_date for c in cycles] == [date(2025, 1, 8), date(2025, 1, 15), date(2025, 1, 22)]


def test_iteration_ceiling_raises_instead_of_looping():
    grid = DueDateGrid("Weekly", "Monday", max_iterations=10)
    with pytest.raises(CalendarConvergenceError) as excinfo:
        grid.count_cycles(date(2025, 1, 6), date(2026, 1, 1))
    assert excinfo.value.iterations == 11

    with pytest.raises(CalendarConvergenceError):
        grid.due_date_for_cycle(11, date(2025, 1, 6))


def test_anchor_validation():
    assert DueDateGrid("weekly", "friday").due_anchor == "Friday"
    assert DueDateGrid("MONTHLY", "15").due_anchor == 15
    assert DueDateGrid(Frequency.FORTNIGHTLY, "Monday").frequency == Frequency.FORTNIGHTLY

    with pytest.raises(InvalidSchedule):
        DueDateGrid("Monthly", 32)
    with pytest.raises(InvalidSchedule):
        DueDateGrid("Monthly", "Wednesday")
    with pytest.raises(InvalidSchedule):
        DueDateGrid("Weekly", "Funday")
    with pytest.raises(InvalidSchedule):
        DueDateGrid("Daily", "Monday")


def test_matches():
    grid = DueDateGrid("Monthly", 31)
    assert grid.matches(date(2025, 2, 28))
    assert grid.matches(date(2025, 4, 30))
    assert not grid.matches(date(2025, 3, 30))


def test_clamp_day():
    assert clamp_day(2025, 2, 31) == date(2025, 2, 28)
    assert clamp_day(2024, 2, 31) == date(2024, 2, 29)
    assert clamp_day(2025, 4, 15) == date(2025, 4, 15)
