from datetime import date
from types import SimpleNamespace

import pytest

from services.renewal_service import RenewalService


@pytest.fixture
def renewals():
    return RenewalService()


def test_etisalat_cycle_is_28_days(renewals):
    assert renewals.resolve("2025-01-01", None, "etisalat") == date(2025, 1, 29)


@pytest.mark.parametrize("provider", ["orange", "we", None, "unknown"])
def test_other_providers_use_30_days(renewals, provider):
    assert renewals.resolve("2025-01-01", None, provider) == date(2025, 1, 31)


def test_provider_match_ignores_case_and_whitespace(renewals):
    assert renewals.cycle_length(" Etisalat ") == 28
    assert renewals.cycle_length("ORANGE") == 30


def test_explicit_renewal_date_wins(renewals):
    assert renewals.resolve("2025-01-01", "2025-06-15", "etisalat") == date(2025, 6, 15)
    assert renewals.resolve(None, "15/06/2025", None) == date(2025, 6, 15)


def test_unparseable_explicit_date_falls_back_to_charging_date(renewals):
    assert renewals.resolve("2025-01-01", "someday", "orange") == date(2025, 1, 31)


@pytest.mark.parametrize("charging", [None, "", "not a date"])
def test_no_charging_date_means_no_renewal(renewals, charging):
    assert renewals.resolve(charging, None, "we") is None


def test_cycle_crosses_month_boundary(renewals):
    assert renewals.resolve("2025-01-15", None, "etisalat") == date(2025, 2, 12)
    assert renewals.resolve("5-Aug", None, "orange") == date(2025, 9, 4)


def test_resolve_is_idempotent(renewals):
    first = renewals.resolve("02/01/2025", None, "etisalat")
    assert renewals.resolve("02/01/2025", None, "etisalat") == first


def test_custom_cycle_table():
    renewals = RenewalService(cycle_days={"We": 15}, default_cycle_days=31)
    assert renewals.resolve("2025-01-01", None, "we") == date(2025, 1, 16)
    assert renewals.resolve("2025-01-01", None, "orange") == date(2025, 2, 1)


def test_days_until_renewal(renewals):
    today = date(2025, 1, 20)
    assert renewals.days_until_renewal(date(2025, 1, 29), today) == 9
    assert renewals.days_until_renewal(date(2025, 1, 10), today) == -10
    assert renewals.days_until_renewal(None, today) is None


def test_describe_customer(renewals):
    customer = SimpleNamespace(charging_date="2025-01-01", renewal_date=None, provider="etisalat")
    info = renewals.describe(customer, today=date(2025, 1, 1))

    assert info.renewal_date == date(2025, 1, 29)
    assert info.specified is True
    assert info.days_until_renewal == 28
    assert info.display == "٢٩/١/٢٠٢٥"


def test_describe_customer_without_dates(renewals):
    customer = SimpleNamespace(charging_date=None, renewal_date=None, provider="orange")
    info = renewals.describe(customer)

    assert info.renewal_date is None
    assert info.specified is False
    assert info.days_until_renewal is None
    assert info.display == "غير محدد"
