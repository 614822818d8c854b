from datetime import date

from app.services.calendar_walker import SLOTS_BY_START, TIME_SLOTS, CalendarWalker, is_weekend


def test_walk_skips_weekends_and_includes_both_ends():
    # 2025-03-07 is a Friday, 2025-03-10 a Monday.
    walker = CalendarWalker(date(2025, 3, 7), date(2025, 3, 10))
    assert list(walker) == [date(2025, 3, 7), date(2025, 3, 10)]


def test_walk_is_restartable():
    walker = CalendarWalker(date(2025, 3, 3), date(2025, 3, 7))
    first = list(walker)
    second = list(walker)
    assert first == second
    assert len(first) == 5


def test_weekend_only_range_is_empty():
    assert list(CalendarWalker(date(2025, 3, 8), date(2025, 3, 9))) == []


def test_inverted_range_is_empty():
    assert list(CalendarWalker(date(2025, 3, 10), date(2025, 3, 3))) == []


def test_is_weekend():
    assert is_weekend(date(2025, 3, 8))
    assert is_weekend(date(2025, 3, 9))
    assert not is_weekend(date(2025, 3, 10))


def test_fixed_slot_table_skips_lunch():
    assert [slot.start for slot in TIME_SLOTS] == [
        "09:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00", "17:00",
    ]
    assert all(slot.end.endswith(":50") for slot in TIME_SLOTS)
    assert "12:00" not in SLOTS_BY_START
    assert TIME_SLOTS[3].start_minutes == 13 * 60
