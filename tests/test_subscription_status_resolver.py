from datetime import date, timedelta

import pytest

from models import SubscriptionPeriod, SubscriptionStatus, SubscriptionType
from services.subscription_status_resolver import SubscriptionStatusResolver as Resolver

from conftest import NOW, period_ending_in


def test_no_period_is_new(now):
    result = Resolver.resolve_status(None, now)
    assert result.status == SubscriptionStatus.NEW
    assert result.days_remaining is None


def test_open_ended_period_is_new(now):
    period = SubscriptionPeriod(start_date=date(2026, 1, 1), end_date=None)
    result = Resolver.resolve_status(period, now)
    assert result.status == SubscriptionStatus.NEW
    assert result.days_remaining is None


def test_ends_today_is_expiring_soon_with_zero_days(now):
    result = Resolver.resolve_status(period_ending_in(0), now)
    assert result.status == SubscriptionStatus.EXPIRING_SOON
    assert result.days_remaining == 0


def test_ended_yesterday_is_expired(now):
    result = Resolver.resolve_status(period_ending_in(-1), now)
    assert result.status == SubscriptionStatus.EXPIRED
    assert result.days_remaining == 0


@pytest.mark.parametrize("days, expected", [
    (1, SubscriptionStatus.EXPIRING_SOON),
    (7, SubscriptionStatus.EXPIRING_SOON),
    (8, SubscriptionStatus.ACTIVE),
    (90, SubscriptionStatus.ACTIVE),
])
def test_threshold_boundary(now, days, expected):
    result = Resolver.resolve_status(period_ending_in(days), now)
    assert result.status == expected
    assert result.days_remaining == days


def test_custom_threshold(now):
    period = period_ending_in(20)
    assert Resolver.resolve_status(period, now, expiring_soon_threshold_days=30).status == SubscriptionStatus.EXPIRING_SOON
    assert Resolver.resolve_status(period, now, expiring_soon_threshold_days=19).status == SubscriptionStatus.ACTIVE


def test_accepts_plain_date_for_now():
    result = Resolver.resolve_status(period_ending_in(3), NOW.date())
    assert result.status == SubscriptionStatus.EXPIRING_SOON
    assert result.days_remaining == 3


def test_days_remaining_is_unclamped(now):
    assert Resolver.days_remaining(NOW.date() - timedelta(days=4), now) == -4
    assert Resolver.days_remaining(NOW.date(), now) == 0


def test_classify_subscription_type():
    assert Resolver.classify_subscription_type(False) == SubscriptionType.NEW
    assert Resolver.classify_subscription_type(True) == SubscriptionType.RENEWED


def test_period_end_before_start_rejected():
    with pytest.raises(ValueError):
        SubscriptionPeriod(start_date=date(2026, 3, 10), end_date=date(2026, 3, 1))
