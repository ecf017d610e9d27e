"""Display formatting for match results."""

from __future__ import annotations


def format_difference(diff: float | None) -> str:
    """Signed percentage with one decimal, e.g. "+2.8%" or "-5.0%"."""
    if diff is None:
        return "n/a"
    sign = "+" if diff >= 0 else ""
    return f"{sign}{diff:.1f}%"


def format_distance(meters: float) -> str:
    """Distance in kilometres with two decimals."""
    return f"{meters / 1000:.2f} km"


def format_duration(seconds: float) -> str:
    """Duration as "1h 5m" or "12m 30s"."""
    total = int(round(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {secs}s"


def format_pace(seconds_per_km: float) -> str:
    """Pace as "m:ss/km"."""
    total = round(seconds_per_km)
    return f"{total // 60}:{total % 60:02d}/km"
