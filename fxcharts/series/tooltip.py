from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from fxcharts.models.series import RatePoint

# Fixed English names so the label does not follow the process locale.
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def nearest_point(points: Sequence[RatePoint], at: date) -> Optional[RatePoint]:
    """
    Point closest to `at` along the date axis.
    Ties keep the earlier point in the sequence.
    """
    best: Optional[RatePoint] = None
    best_distance: Optional[int] = None

    for point in points:
        distance = abs((point.date - at).days)
        if best_distance is None or distance < best_distance:
            best = point
            best_distance = distance

    return best


def format_rate(rate: float) -> str:
    """Shortest form of the rate: 1.0 -> "1", 4.612 -> "4.612"."""
    if float(rate).is_integer():
        return str(int(rate))
    return repr(float(rate))


def format_day(day: date) -> str:
    """Day label in the form Wed Jan 01 2020."""
    return f"{WEEKDAYS[day.weekday()]} {MONTHS[day.month - 1]} {day.day:02d} {day.year:04d}"


def tooltip_lines(base: str, target: str, point: RatePoint) -> list[str]:
    # e.g. ["1 NZD = 4.612 CNY", "Wed Jan 01 2020"]
    return [
        f"1 {base} = {format_rate(point.rate)} {target}",
        format_day(point.date),
    ]
