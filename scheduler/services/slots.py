"""Slot generation.

A representative's bookable slots for a date are derived, never stored:
the weekday's ``WeeklyAvailability`` row is walked in ``slot_duration``
steps from ``start_time`` while the cursor is strictly before ``end_time``.
Candidates inside a break ``[start, end)`` are dropped, as are times already
claimed by an active appointment.
"""

from collections.abc import Iterable

from sqlalchemy.orm import Session

from scheduler.schemas import DaySlotsResponse, DayState
from scheduler.services import appointment_store, availability_store
from scheduler.services.clock import MINUTES_PER_DAY, day_of_week, format_clock, parse_clock


def _break_bounds(break_time) -> tuple[int, int]:
    if isinstance(break_time, dict):
        return parse_clock(break_time['start']), parse_clock(break_time['end'])
    return parse_clock(break_time.start), parse_clock(break_time.end)


def generate_slots(schedule, booked_times: Iterable[str] = ()) -> list[str]:
    if schedule is None or schedule.slot_duration <= 0:
        return []

    booked = set(booked_times)
    breaks = [_break_bounds(break_time) for break_time in schedule.break_times or []]
    end_minutes = parse_clock(schedule.end_time)

    slots: list[str] = []
    current = parse_clock(schedule.start_time)

    while current < end_minutes and current < MINUTES_PER_DAY:
        in_break = any(break_start <= current < break_end for break_start, break_end in breaks)
        candidate = format_clock(current)

        if not in_break and candidate not in booked:
            slots.append(candidate)

        current += schedule.slot_duration

    return slots


def list_slots(db: Session, representative_id: int, requested_date: str) -> list[str]:
    return describe_day(db, representative_id, requested_date).slots


def describe_day(db: Session, representative_id: int, requested_date: str) -> DaySlotsResponse:
    """Slots for a date plus whether an empty list means closed or full."""
    schedule = availability_store.get_day(db, representative_id, day_of_week(requested_date))
    if schedule is None:
        return DaySlotsResponse(date=requested_date, state=DayState.UNAVAILABLE, slots=[])

    booked_times = appointment_store.active_times_for_day(db, representative_id, requested_date)
    slots = generate_slots(schedule, booked_times)

    if slots:
        state = DayState.AVAILABLE
    elif generate_slots(schedule):
        state = DayState.FULLY_BOOKED
    else:
        # Breaks covering every candidate leave nothing to book either.
        state = DayState.UNAVAILABLE

    return DaySlotsResponse(date=requested_date, state=state, slots=slots)
