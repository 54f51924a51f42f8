from types import SimpleNamespace

import pytest

from scheduler.schemas import DayState
from scheduler.services.clock import day_of_week, format_clock, parse_clock, parse_date
from scheduler.services.slots import describe_day, generate_slots, list_slots
from tests.factories import MONDAY, SUNDAY, TUESDAY, add_appointment, add_representative, add_schedule


def _schedule(start_time='09:00', end_time='17:00', slot_duration=30, break_times=None):
    return SimpleNamespace(
        start_time=start_time,
        end_time=end_time,
        slot_duration=slot_duration,
        break_times=break_times or [],
    )


def test_generate_slots_skips_lunch_break() -> None:
    schedule = _schedule(break_times=[{'start': '12:00', 'end': '13:00'}])

    slots = generate_slots(schedule, set())

    assert len(slots) == 14
    assert slots[0] == '09:00'
    assert slots[-1] == '16:30'
    assert '12:00' not in slots
    assert '12:30' not in slots
    assert '13:00' in slots


def test_generate_slots_break_is_half_open() -> None:
    schedule = _schedule(start_time='11:30', end_time='13:00', break_times=[{'start': '12:00', 'end': '12:30'}])

    assert generate_slots(schedule) == ['11:30', '12:30']


def test_generate_slots_stops_before_overshooting_end() -> None:
    schedule = _schedule(start_time='09:00', end_time='10:40', slot_duration=45)

    assert generate_slots(schedule) == ['09:00', '09:45', '10:30']


def test_generate_slots_compares_minutes_not_strings() -> None:
    schedule = _schedule(start_time='08:00', end_time='10:00', slot_duration=60)

    assert generate_slots(schedule) == ['08:00', '09:00']


def test_generate_slots_drops_booked_times_and_keeps_order() -> None:
    schedule = _schedule(start_time='09:00', end_time='11:00')

    assert generate_slots(schedule, {'09:30', '10:30'}) == ['09:00', '10:00']


def test_generate_slots_with_start_after_end_is_empty() -> None:
    assert generate_slots(_schedule(start_time='17:00', end_time='09:00')) == []


def test_generate_slots_without_schedule_is_empty() -> None:
    assert generate_slots(None, set()) == []


def test_generate_slots_accepts_overlapping_breaks() -> None:
    schedule = _schedule(
        start_time='09:00',
        end_time='11:00',
        break_times=[{'start': '09:00', 'end': '10:00'}, {'start': '09:30', 'end': '10:30'}],
    )

    assert generate_slots(schedule) == ['10:30']


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('2026-01-04', 0),
        ('2026-01-05', 1),
        ('2026-01-10', 6),
        ('2024-02-29', 4),
    ],
)
def test_day_of_week_counts_from_sunday(value: str, expected: int) -> None:
    assert day_of_week(value) == expected


@pytest.mark.parametrize('value', ['9:00', '24:00', '12:60', '1200', '', 'noon'])
def test_parse_clock_rejects_malformed_times(value: str) -> None:
    with pytest.raises(ValueError):
        parse_clock(value)


@pytest.mark.parametrize('value', ['2026-1-5', '2026-02-30', '05-01-2026', ''])
def test_parse_date_rejects_malformed_dates(value: str) -> None:
    with pytest.raises(ValueError):
        parse_date(value)


def test_format_clock_zero_pads() -> None:
    assert format_clock(parse_clock('07:05')) == '07:05'


def test_list_slots_returns_empty_when_no_schedule_for_weekday(db, representative) -> None:
    assert list_slots(db, representative.id, SUNDAY) == []


def test_list_slots_excludes_active_appointments_only(db, representative, requester) -> None:
    add_appointment(db, requester.id, representative.id, MONDAY, '09:00', status='pending')
    add_appointment(db, requester.id, representative.id, MONDAY, '09:30', status='accepted')
    add_appointment(db, requester.id, representative.id, MONDAY, '10:00', status='rejected')
    add_appointment(db, requester.id, representative.id, MONDAY, '10:30', status='cancelled')
    add_appointment(db, requester.id, representative.id, MONDAY, '11:00', status='completed')

    slots = list_slots(db, representative.id, MONDAY)

    assert '09:00' not in slots
    assert '09:30' not in slots
    assert slots[:4] == ['10:00', '10:30', '11:00', '11:30']


def test_list_slots_ignores_other_dates_and_representatives(db, representative, requester) -> None:
    other = add_representative(db, email='other-rep@example.com')
    add_schedule(db, other.id)
    add_appointment(db, requester.id, other.id, MONDAY, '09:00')
    add_appointment(db, requester.id, representative.id, TUESDAY, '09:30')

    assert list_slots(db, representative.id, MONDAY)[:2] == ['09:00', '09:30']


def test_describe_day_distinguishes_closed_from_fully_booked(db, requester) -> None:
    rep = add_representative(db)
    add_schedule(db, rep.id, start_time='09:00', end_time='10:00', slot_duration=30, break_times=[])

    assert describe_day(db, rep.id, SUNDAY).state == DayState.UNAVAILABLE
    assert describe_day(db, rep.id, MONDAY).state == DayState.AVAILABLE

    add_appointment(db, requester.id, rep.id, MONDAY, '09:00')
    add_appointment(db, requester.id, rep.id, MONDAY, '09:30', status='accepted')

    day = describe_day(db, rep.id, MONDAY)
    assert day.state == DayState.FULLY_BOOKED
    assert day.slots == []
