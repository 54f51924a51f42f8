"""Wall-clock string helpers.

Persisted dates are ``YYYY-MM-DD`` and times are ``HH:MM`` (24 hour). Times
are compared as minutes since midnight, never as strings.
"""

import re
from datetime import date, datetime

CLOCK_PATTERN = re.compile(r'^(\d{2}):(\d{2})$')
DATE_FORMAT = '%Y-%m-%d'
MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    match = CLOCK_PATTERN.match(value or '')
    if not match:
        raise ValueError(f'Invalid time {value!r}; expected HH:MM.')

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f'Invalid time {value!r}; expected HH:MM.')

    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def parse_date(value: str) -> date:
    try:
        parsed = datetime.strptime(value or '', DATE_FORMAT).date()
    except ValueError as exc:
        raise ValueError(f'Invalid date {value!r}; expected YYYY-MM-DD.') from exc

    # strptime accepts single-digit fields; persisted dates must be zero padded.
    if parsed.strftime(DATE_FORMAT) != value:
        raise ValueError(f'Invalid date {value!r}; expected YYYY-MM-DD.')

    return parsed


def day_of_week(value: str) -> int:
    """Weekday of a ``YYYY-MM-DD`` date with 0 = Sunday through 6 = Saturday."""
    return (parse_date(value).weekday() + 1) % 7
