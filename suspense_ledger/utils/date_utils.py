"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Dict, Optional

MONTHS: Dict[str, int] = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}


def month_day_to_date(year: int, month: int, day: int) -> date:
    """Build a date, rolling days past month end into the following month (Feb 30 -> Mar 2)"""
    return date(year, month, 1) + timedelta(days=day - 1)


def parse_dd_mm_yyyy(value: str) -> Optional[date]:
    """Parse a DD-MM-YYYY string, returning None when it is not a real date"""
    try:
        day, month, year = (int(part) for part in value.split("-"))
        return date(year, month, day)
    except ValueError:
        return None
