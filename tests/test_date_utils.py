from datetime import date, datetime

import pytest

from utils.date_utils import DateUtils, normalize_date, format_date


@pytest.mark.parametrize("value,expected", [
    ("2025-01-02", date(2025, 1, 2)),
    ("2025/01/02", date(2025, 1, 2)),
    ("02/01/2025", date(2025, 1, 2)),
    ("2/1/2025", date(2025, 1, 2)),
    ("5-Aug", date(2025, 8, 5)),
    ("5-aug", date(2025, 8, 5)),
    ("  2025-03-09  ", date(2025, 3, 9)),
])
def test_normalize_known_formats(value, expected):
    assert normalize_date(value) == expected


def test_slash_and_iso_forms_agree():
    assert normalize_date("2025/01/02") == normalize_date("2025-01-02")


def test_day_first_slash_format_is_not_month_first():
    assert normalize_date("02/01/2025") == date(2025, 1, 2)
    assert normalize_date("13/01/2025") == date(2025, 1, 13)


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2025-02-30", "31/02/2025", "31-Feb"])
def test_unparseable_or_missing_gives_none(value):
    assert normalize_date(value) is None


def test_typed_dates_pass_through():
    assert normalize_date(date(2025, 4, 1)) == date(2025, 4, 1)
    assert normalize_date(datetime(2025, 4, 1, 15, 30)) == date(2025, 4, 1)


def test_day_month_uses_reference_year():
    assert DateUtils.parse_flexible_date("5-Aug", reference_year=2026) == date(2026, 8, 5)


def test_day_month_with_unknown_month_is_rejected():
    assert normalize_date("5-Foo") is None


def test_display_uses_unpadded_day_month_year_in_arabic_digits():
    assert format_date(date(2025, 1, 29)) == "٢٩/١/٢٠٢٥"
    assert format_date("2025-12-05") == "٥/١٢/٢٠٢٥"


def test_display_placeholder_for_missing_dates():
    assert format_date(None) == "غير محدد"
    assert format_date("garbage") == "غير محدد"
    assert DateUtils.format_for_display(None, placeholder="-") == "-"


def test_local_today_is_a_date():
    assert isinstance(DateUtils.get_local_today(), date)


@pytest.mark.parametrize("value", ["12:30", "Sunday", "may", "dec", "1st", "2025"])
def test_text_without_day_and_month_gives_none(value):
    assert normalize_date(value) is None


@pytest.mark.parametrize("value,expected", [
    ("Aug 5 2025", date(2025, 8, 5)),
    ("5 August", date(2025, 8, 5)),
    ("March 3, 2024", date(2024, 3, 3)),
])
def test_free_text_with_day_and_month_still_parses(value, expected):
    assert normalize_date(value) == expected
