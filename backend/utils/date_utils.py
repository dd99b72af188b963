"""
Date utility functions for line records.
Handles parsing of the loosely formatted dates stored on customer rows and
formatting them for display.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional, Union
import pytz
from dateutil import parser

from config.settings import settings

DateInput = Union[str, date, datetime, None]

ISO_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
YMD_SLASH_PATTERN = re.compile(r'^\d{4}/\d{2}/\d{2}$')
DMY_SLASH_PATTERN = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})$')
DAY_MONTH_PATTERN = re.compile(r'^(\d{1,2})-([a-z]{3})$', re.IGNORECASE)

MONTH_ABBREVIATIONS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

ARABIC_INDIC_DIGITS = str.maketrans('0123456789', '٠١٢٣٤٥٦٧٨٩')


class DateUtils:
    """Date helpers for charging, arrival and renewal dates."""

    @staticmethod
    def get_local_today(tz_name: str = None) -> date:
        """Current calendar date in the business timezone."""
        tz = pytz.timezone(tz_name or settings.DEFAULT_TIMEZONE)
        return datetime.now(tz).date()

    @staticmethod
    def parse_flexible_date(value: DateInput, reference_year: int = None) -> Optional[date]:
        """
        Parse a stored date of unknown format into a calendar date.

        Formats are tried in order: ``YYYY-MM-DD``, ``YYYY/MM/DD``,
        ``DD/MM/YYYY``, ``D-Mon`` (year taken from ``reference_year``), then
        a generic dateutil parse that must find both day and month in the
        text. Anything unparseable, including impossible dates like
        ``2025-02-30``, gives ``None``.
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            return None

        text = value.strip()
        if not text:
            return None

        if reference_year is None:
            reference_year = settings.RENEWAL_REFERENCE_YEAR

        try:
            if ISO_PATTERN.match(text):
                return date.fromisoformat(text)

            if YMD_SLASH_PATTERN.match(text):
                return date.fromisoformat(text.replace('/', '-'))

            match = DMY_SLASH_PATTERN.match(text)
            if match:
                day, month, year = (int(part) for part in match.groups())
                return date(year, month, day)

            match = DAY_MONTH_PATTERN.match(text)
            if match:
                month = MONTH_ABBREVIATIONS.get(match.group(2).lower())
                if month:
                    return date(reference_year, month, int(match.group(1)))

            # dateutil as fallback; the text itself must supply day and month
            first = parser.parse(text, default=datetime(reference_year, 1, 1)).date()
            second = parser.parse(text, default=datetime(reference_year, 2, 2)).date()
            return first if first == second else None

        except (ValueError, OverflowError):
            return None

    @staticmethod
    def add_days(value: date, days: int) -> date:
        return value + timedelta(days=days)

    @staticmethod
    def format_for_display(value: DateInput, placeholder: str = None) -> str:
        """
        Format a date the way the dashboard shows it: day/month/year,
        unpadded, in Arabic-Indic digits unless disabled in settings.
        """
        parsed = DateUtils.parse_flexible_date(value)
        if parsed is None:
            return settings.NOT_SPECIFIED_LABEL if placeholder is None else placeholder

        text = f"{parsed.day}/{parsed.month}/{parsed.year}"
        if settings.DISPLAY_ARABIC_DIGITS:
            text = text.translate(ARABIC_INDIC_DIGITS)
        return text


# Convenience functions for common operations
def normalize_date(value: DateInput) -> Optional[date]:
    """Quick date parsing."""
    return DateUtils.parse_flexible_date(value)

def format_date(value: DateInput) -> str:
    """Quick date formatting."""
    return DateUtils.format_for_display(value)
