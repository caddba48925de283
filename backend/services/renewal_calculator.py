"""
Renewal Calculator
==================

Term dates for the next subscription period and renewal timing.

Business Rules:
1. Term end dates are inclusive: a 30-day term starting on the 1st ends on the 30th
2. NEW subscription: starts today
3. UPGRADE / DOWNGRADE: start fresh from today (no carry-forward)
4. RENEWAL (current term still running): start the day after the current end
5. RENEWAL (current term expired): start fresh from today
6. Timing: LATE if the current term already ended, EARLY if more than the
   early threshold remains, otherwise STANDARD

The previous period is never modified; every purchase, renewal or change
produces a new SubscriptionPeriod.
"""

from datetime import date, timedelta
from typing import Optional

from models import Plan, RenewalTiming, RenewalType, SubscriptionPeriod
from services.subscription_status_resolver import DateLike, as_date


def add_months(start: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the target month's length
    (e.g. Jan 31 + 1 month => Feb 28/29).
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    if m == 12:
        next_month = date(y + 1, 1, 1)
    else:
        next_month = date(y, m + 1, 1)
    last_day = next_month - timedelta(days=1)
    return date(y, m, min(start.day, last_day.day))


class RenewalCalculator:

    DEFAULT_EARLY_RENEWAL_THRESHOLD = 7

    @staticmethod
    def term_end(start: date, duration_days: int) -> date:
        return start + timedelta(days=duration_days - 1)

    @staticmethod
    def term_end_for_months(start: date, months: int) -> date:
        return add_months(start, months) - timedelta(days=1)

    @staticmethod
    def next_term_start(
        previous: Optional[SubscriptionPeriod],
        renewal_type: RenewalType,
        now: DateLike,
    ) -> date:
        """
        Start date of the next term.

        Args:
            previous: Current/last period, if any
            renewal_type: Caller-assigned type of the new period
            now: Snapshot of the current time

        Returns:
            date: Day after the current end for a running RENEWAL, else today
        """
        today = as_date(now)

        if renewal_type == RenewalType.RENEWAL and previous and previous.end_date:
            # Still running: continue without a gap or overlap
            if previous.end_date >= today:
                return previous.end_date + timedelta(days=1)

        return today

    @staticmethod
    def build_next_period(
        previous: Optional[SubscriptionPeriod],
        plan: Plan,
        renewal_type: RenewalType,
        now: DateLike,
    ) -> SubscriptionPeriod:
        start = RenewalCalculator.next_term_start(previous, renewal_type, now)
        return SubscriptionPeriod(
            start_date=start,
            end_date=RenewalCalculator.term_end(start, plan.duration_days),
            plan_id=plan.id,
            renewal_type=renewal_type,
        )

    @staticmethod
    def classify_renewal_timing(
        current_end: Optional[DateLike],
        now: DateLike,
        early_threshold_days: int = DEFAULT_EARLY_RENEWAL_THRESHOLD,
    ) -> RenewalTiming:
        if current_end is None:
            return RenewalTiming.STANDARD

        days_until_expiry = (as_date(current_end) - as_date(now)).days
        if days_until_expiry < 0:
            return RenewalTiming.LATE
        if days_until_expiry > early_threshold_days:
            return RenewalTiming.EARLY
        return RenewalTiming.STANDARD
