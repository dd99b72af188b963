from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from config.settings import settings
from utils.date_utils import DateInput, DateUtils


@dataclass(frozen=True)
class RenewalInfo:
    """Renewal outcome handed to the presentation layer."""
    renewal_date: Optional[date]
    display: str
    specified: bool
    days_until_renewal: Optional[int]


class RenewalService:
    """
    Resolves the effective renewal date of a line.

    An explicit renewal date always wins. Otherwise the renewal date is the
    charging date plus the provider's billing cycle (28 days for Etisalat,
    30 for everyone else). The returned date is the renewal date itself; no
    "due the day after" adjustment is applied anywhere.
    """

    def __init__(
        self,
        cycle_days: Optional[Dict[str, int]] = None,
        default_cycle_days: Optional[int] = None,
        reference_year: Optional[int] = None
    ):
        table = settings.PROVIDER_CYCLE_DAYS if cycle_days is None else cycle_days
        self.cycle_days = {name.strip().lower(): days for name, days in table.items()}
        self.default_cycle_days = default_cycle_days or settings.DEFAULT_CYCLE_DAYS
        self.reference_year = reference_year or settings.RENEWAL_REFERENCE_YEAR

    def cycle_length(self, provider: Optional[str]) -> int:
        """Billing cycle length in days; unknown or missing providers get the default."""
        if not provider:
            return self.default_cycle_days
        return self.cycle_days.get(provider.strip().lower(), self.default_cycle_days)

    def resolve(
        self,
        charging: DateInput,
        explicit_renewal: DateInput = None,
        provider: Optional[str] = None
    ) -> Optional[date]:
        """Effective renewal date, or None when there is nothing to compute from."""
        explicit = DateUtils.parse_flexible_date(explicit_renewal, self.reference_year)
        if explicit is not None:
            return explicit

        base = DateUtils.parse_flexible_date(charging, self.reference_year)
        if base is None:
            return None

        return DateUtils.add_days(base, self.cycle_length(provider))

    def resolve_for_customer(self, customer) -> Optional[date]:
        return self.resolve(customer.charging_date, customer.renewal_date, customer.provider)

    def today(self) -> date:
        return DateUtils.get_local_today()

    def days_until_renewal(self, renewal: Optional[date], today: Optional[date] = None) -> Optional[int]:
        """Signed number of days from today to the renewal date."""
        if renewal is None:
            return None
        today = today or DateUtils.get_local_today()
        return (renewal - today).days

    def describe(self, customer, today: Optional[date] = None) -> RenewalInfo:
        renewal = self.resolve_for_customer(customer)
        return RenewalInfo(
            renewal_date=renewal,
            display=DateUtils.format_for_display(renewal),
            specified=renewal is not None,
            days_until_renewal=self.days_until_renewal(renewal, today)
        )


def get_renewal_service() -> RenewalService:
    return RenewalService()
