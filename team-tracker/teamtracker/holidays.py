"""Static public-holiday register (Japan, 2025-2026).

Keyed by exact (year, month, day). No lookup ever leaves the process.
"""
from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Tuple

PUBLIC_HOLIDAYS: Dict[Tuple[int, int, int], str] = {
    # 2025
    (2025, 1, 1): "New Year's Day",
    (2025, 2, 11): "National Foundation Day",
    (2025, 2, 23): "Emperor's Birthday",
    (2025, 2, 24): "Substitute Holiday",
    (2025, 3, 20): "Vernal Equinox Day",
    (2025, 4, 29): "Showa Day",
    (2025, 5, 3): "Constitution Memorial Day",
    (2025, 5, 4): "Greenery Day",
    (2025, 5, 5): "Children's Day",
    (2025, 5, 6): "Substitute Holiday",
    (2025, 7, 21): "Marine Day",
    (2025, 8, 11): "Mountain Day",
    (2025, 9, 15): "Respect for the Aged Day",
    (2025, 9, 23): "Autumnal Equinox Day",
    (2025, 10, 13): "Sports Day",
    (2025, 11, 3): "Culture Day",
    (2025, 11, 23): "Labour Thanksgiving Day",
    (2025, 11, 24): "Substitute Holiday",
    # 2026
    (2026, 1, 1): "New Year's Day",
    (2026, 1, 12): "Coming of Age Day",
    (2026, 2, 11): "National Foundation Day",
    (2026, 2, 23): "Emperor's Birthday",
    (2026, 3, 20): "Vernal Equinox Day",
    (2026, 4, 29): "Showa Day",
    (2026, 5, 3): "Constitution Memorial Day",
    (2026, 5, 4): "Greenery Day",
    (2026, 5, 5): "Children's Day",
    (2026, 5, 6): "Substitute Holiday",
    (2026, 7, 20): "Marine Day",
    (2026, 8, 11): "Mountain Day",
    (2026, 9, 21): "Respect for the Aged Day",
    (2026, 9, 22): "Citizens' Holiday",
    (2026, 9, 23): "Autumnal Equinox Day",
    (2026, 10, 12): "Sports Day",
    (2026, 11, 3): "Culture Day",
    (2026, 11, 23): "Labour Thanksgiving Day",
}


def get_holiday_name(d: date) -> Optional[str]:
    return PUBLIC_HOLIDAYS.get((d.year, d.month, d.day))
