"""
Lease Payment Service.

Display hints for lease rent: whether an active lease is likely due this
month, and the payment schedule inside a date window. This is not a ledger;
malformed leases produce no hint rather than an error.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable, List, Optional

from farm_insights.services.agronomic_rules import (
    UPCOMING_PAYMENT_WINDOW_DAYS,
    QUARTERLY_PAYMENT_MONTHS,
    SEMI_ANNUAL_PAYMENT_MONTHS,
)

logger = logging.getLogger(__name__)


class LeaseStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentFrequency(str, Enum):
    """Rent frequencies a lease may carry."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return {
            PaymentFrequency.MONTHLY: "Monthly",
            PaymentFrequency.QUARTERLY: "Quarterly",
            PaymentFrequency.SEMI_ANNUAL: "Semi-Annual",
            PaymentFrequency.ANNUAL: "Annual",
        }.get(self, "Unknown")


def parse_frequency(value: Any) -> PaymentFrequency:
    """Normalize free-text rent frequency ('Semi-Annual', 'monthly ', ...)."""
    if isinstance(value, PaymentFrequency):
        return value
    if not isinstance(value, str) or not value.strip():
        return PaymentFrequency.UNKNOWN
    normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
    if normalized == "semiannual":
        normalized = PaymentFrequency.SEMI_ANNUAL.value
    try:
        return PaymentFrequency(normalized)
    except ValueError:
        logger.warning(f"[Leases] Unrecognized rent frequency: {value!r}")
        return PaymentFrequency.UNKNOWN


def _field(lease: Any, name: str) -> Any:
    """Read a lease attribute from a model, dataclass or plain dict."""
    if isinstance(lease, dict):
        return lease.get(name)
    return getattr(lease, name, None)


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _is_active(lease: Any) -> bool:
    status = _field(lease, "status")
    if isinstance(status, Enum):
        status = status.value
    return isinstance(status, str) and status.strip().lower() == LeaseStatus.ACTIVE.value


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _anniversary(start: date, year: int) -> date:
    day = min(start.day, calendar.monthrange(year, start.month)[1])
    return date(year, start.month, day)


def is_lease_payment_due(lease: Any, as_of: Any) -> bool:
    """
    Check whether an active lease likely has a payment due in as_of's month.

    Monthly leases are always potentially due; annual leases are due in the
    month of their start date, any year. Other frequencies, inactive leases,
    and missing or malformed values return False.
    """
    if lease is None or not _is_active(lease):
        return False

    frequency = parse_frequency(_field(lease, "rent_frequency"))
    if frequency == PaymentFrequency.MONTHLY:
        return True
    if frequency == PaymentFrequency.ANNUAL:
        start_date = _as_date(_field(lease, "start_date"))
        as_of_date = _as_date(as_of)
        if start_date is None or as_of_date is None:
            return False
        return start_date.month == as_of_date.month
    return False


@dataclass
class LeasePayment:
    """A single scheduled rent payment."""
    lease: Any
    amount: float
    due_date: date
    frequency: PaymentFrequency

    def is_overdue(self, as_of: date) -> bool:
        return self.due_date < as_of

    def is_upcoming(self, as_of: date) -> bool:
        days_until_due = (self.due_date - as_of).days
        return 0 <= days_until_due <= UPCOMING_PAYMENT_WINDOW_DAYS


def calculate_payments_for_lease(lease: Any, start: date, end: date) -> List[LeasePayment]:
    """
    Build the payments of one lease that fall inside [start, end].

    rent_amount is the annual rent; monthly, quarterly and semi-annual
    payments split it evenly. Leases missing dates, amount or frequency
    yield no payments.
    """
    lease_start = _as_date(_field(lease, "start_date"))
    lease_end = _as_date(_field(lease, "end_date"))
    rent_amount = _field(lease, "rent_amount")
    raw_frequency = _field(lease, "rent_frequency")
    if lease_start is None or lease_end is None or rent_amount is None or not raw_frequency:
        return []

    frequency = parse_frequency(raw_frequency)
    rent = float(rent_amount)
    window_start = max(start, lease_start)
    window_end = min(end, lease_end)
    payments = []

    if frequency == PaymentFrequency.MONTHLY:
        current = window_start
        while current <= window_end:
            payments.append(LeasePayment(lease, rent / 12.0, current.replace(day=1), frequency))
            current = add_months(current, 1)

    elif frequency in (PaymentFrequency.QUARTERLY, PaymentFrequency.SEMI_ANNUAL):
        months = QUARTERLY_PAYMENT_MONTHS if frequency == PaymentFrequency.QUARTERLY else SEMI_ANNUAL_PAYMENT_MONTHS
        amount = rent / len(months)
        for year in range(window_start.year, window_end.year + 1):
            for month in months:
                due_date = date(year, month, 1)
                if window_start <= due_date <= window_end:
                    payments.append(LeasePayment(lease, amount, due_date, frequency))

    elif frequency == PaymentFrequency.ANNUAL:
        for year in range(window_start.year, window_end.year + 1):
            due_date = _anniversary(lease_start, year)
            if window_start <= due_date <= window_end:
                payments.append(LeasePayment(lease, rent, due_date, frequency))

    return payments


def upcoming_payments(
    leases: Iterable[Any],
    as_of: date,
    within_days: int = UPCOMING_PAYMENT_WINDOW_DAYS
) -> List[LeasePayment]:
    """Payments of active leases due between as_of and as_of + within_days, by due date."""
    window_end = as_of + timedelta(days=within_days)
    payments = []
    for lease in leases:
        if not _is_active(lease):
            continue
        payments.extend(calculate_payments_for_lease(lease, as_of, window_end))
    payments.sort(key=lambda payment: payment.due_date)
    logger.debug(f"[Leases] {len(payments)} payments due within {within_days} days of {as_of}")
    return payments
