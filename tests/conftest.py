from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from models import FeeTotal, PaymentRecord, Plan, SubscriptionPeriod, Track


# Evening time-of-day on purpose: comparisons must be date-only
NOW = datetime(2026, 3, 15, 21, 45)


def period_ending_in(days: int, length: int = 30) -> SubscriptionPeriod:
    end = NOW.date() + timedelta(days=days)
    return SubscriptionPeriod(start_date=end - timedelta(days=length - 1), end_date=end)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def plan_a():
    return Plan(id="plan-a", name="Basic", price=Decimal("1200"), duration_days=30)


@pytest.fixture
def plan_b():
    return Plan(id="plan-b", name="Premium", price=Decimal("2400"), duration_days=30)


@pytest.fixture
def fee_totals():
    return [
        FeeTotal(track=Track.REGULAR, final_fees=Decimal("1000")),
        FeeTotal(track=Track.PT, final_fees=Decimal("500")),
    ]


@pytest.fixture
def payments():
    return [
        PaymentRecord(id="p1", purpose_track=Track.REGULAR, paid_amount=Decimal("500")),
        PaymentRecord(id="p2", purpose_track=Track.PT, paid_amount=Decimal("200")),
        PaymentRecord(id="p3", purpose_track=Track.REGULAR, paid_amount=Decimal("300")),
    ]
