"""
Subscription Status Resolver
============================

Derives the lifecycle status of a gym or member subscription term.

Business Rules (first match wins):
1. No period, or no end date: NEW (never held a subscription)
2. End date before today: EXPIRED
3. Days remaining <= threshold (0 = expires today): EXPIRING_SOON
4. Otherwise: ACTIVE

Comparisons are date-only. The caller supplies `now` so that a whole table
of subscriptions is resolved against the same instant.
"""

from datetime import date, datetime
from typing import Optional, Union

from models import (
    StatusResult,
    SubscriptionPeriod,
    SubscriptionStatus,
    SubscriptionType,
)

DateLike = Union[datetime, date]


def as_date(value: DateLike) -> date:
    """Drop the time-of-day part, keeping the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


class SubscriptionStatusResolver:
    """Pure status derivation for subscription periods."""

    DEFAULT_EXPIRING_SOON_THRESHOLD = 7

    @staticmethod
    def days_remaining(end_date: DateLike, now: DateLike) -> int:
        """
        Whole calendar days from `now` until `end_date`.

        Returns 0 when the term ends today and a negative count for terms
        that already ended. Not clamped.
        """
        return (as_date(end_date) - as_date(now)).days

    @staticmethod
    def resolve_status(
        period: Optional[SubscriptionPeriod],
        now: DateLike,
        expiring_soon_threshold_days: int = DEFAULT_EXPIRING_SOON_THRESHOLD,
    ) -> StatusResult:
        """
        Resolve the status of a subscription period.

        Args:
            period: The current period, or None if the subject never subscribed
            now: Snapshot of the current time
            expiring_soon_threshold_days: Inclusive EXPIRING_SOON window

        Returns:
            StatusResult: status plus days remaining (None for NEW, 0 for EXPIRED)
        """
        if period is None or period.end_date is None:
            return StatusResult(status=SubscriptionStatus.NEW, days_remaining=None)

        remaining = SubscriptionStatusResolver.days_remaining(period.end_date, now)

        if remaining < 0:
            return StatusResult(status=SubscriptionStatus.EXPIRED, days_remaining=0)

        if remaining <= expiring_soon_threshold_days:
            return StatusResult(status=SubscriptionStatus.EXPIRING_SOON, days_remaining=remaining)

        return StatusResult(status=SubscriptionStatus.ACTIVE, days_remaining=remaining)

    @staticmethod
    def classify_subscription_type(has_prior_period: bool) -> SubscriptionType:
        """NEW for a first subscription, RENEWED otherwise. Display only."""
        return SubscriptionType.RENEWED if has_prior_period else SubscriptionType.NEW
