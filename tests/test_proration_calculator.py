from decimal import Decimal
from fractions import Fraction

import pytest
from pydantic import ValidationError

from models import Plan
from services.proration_calculator import ProrationCalculator, round_currency, round_fraction


@pytest.fixture
def monthly_1000():
    return Plan(id="m1000", price=Decimal("1000"), duration_days=30)


@pytest.fixture
def monthly_3000():
    return Plan(id="m3000", price=Decimal("3000"), duration_days=30)


@pytest.mark.parametrize("days", [0, -5])
def test_no_proration_without_remaining_days(monthly_1000, monthly_3000, days):
    assert ProrationCalculator.compute_proration(monthly_1000, monthly_3000, days) is None


def test_no_proration_without_current_plan(monthly_3000):
    assert ProrationCalculator.compute_proration(None, monthly_3000, 10) is None


def test_upgrade(monthly_1000, monthly_3000):
    result = ProrationCalculator.compute_proration(monthly_1000, monthly_3000, 10)

    assert result.difference == Decimal("667")
    assert result.is_upgrade is True
    assert result.days_remaining == 10
    assert result.current_plan_price == Decimal("1000")
    assert result.new_plan_price == Decimal("3000")
    assert result.signed_difference == Decimal("667")


def test_downgrade_has_same_magnitude(monthly_1000, monthly_3000):
    result = ProrationCalculator.compute_proration(monthly_3000, monthly_1000, 10)

    assert result.difference == Decimal("667")
    assert result.is_upgrade is False
    assert result.signed_difference == Decimal("-667")


def test_plans_of_different_lengths_compare_by_daily_rate():
    monthly = Plan(id="monthly", price=Decimal("900"), duration_days=30)
    quarterly = Plan(id="quarterly", price=Decimal("2430"), duration_days=90)

    result = ProrationCalculator.compute_proration(monthly, quarterly, 10)

    # 30/day -> 27/day
    assert result.is_upgrade is False
    assert result.difference == Decimal("30")


def test_same_daily_rate_is_not_an_upgrade():
    a = Plan(id="a", price=Decimal("600"), duration_days=30)
    b = Plan(id="b", price=Decimal("1200"), duration_days=60)

    result = ProrationCalculator.compute_proration(a, b, 12)

    assert result.difference == Decimal("0")
    assert result.is_upgrade is False


def test_round_currency_halves_up():
    assert round_currency(Decimal("2.5")) == Decimal("3")
    assert round_currency(Decimal("2.49")) == Decimal("2")


def test_daily_rate():
    plan = Plan(id="x", price=Decimal("2400"), duration_days=30)
    assert ProrationCalculator.daily_rate(plan) == Decimal("80")


@pytest.mark.parametrize("duration", [0, -30])
def test_plan_rejects_non_positive_duration(duration):
    with pytest.raises(ValidationError):
        Plan(id="bad", price=Decimal("1000"), duration_days=duration)


def test_plan_rejects_negative_price():
    with pytest.raises(ValidationError):
        Plan(id="bad", price=Decimal("-1"), duration_days=30)


def test_describe(monthly_1000, monthly_3000):
    up = ProrationCalculator.compute_proration(monthly_1000, monthly_3000, 10)
    down = ProrationCalculator.compute_proration(monthly_3000, monthly_1000, 10)

    assert ProrationCalculator.describe(up) == "+₹667 additional amount"
    assert ProrationCalculator.describe(down, currency_symbol="$") == "-$667 credit"


def test_exact_half_unit_rounds_up():
    # 0/day -> 13/12 per day over 6 days is exactly 6.5
    current = Plan(id="free", price=Decimal("0"), duration_days=30)
    new = Plan(id="short", price=Decimal("13"), duration_days=12)

    result = ProrationCalculator.compute_proration(current, new, 6)

    assert result.difference == Decimal("7")
    assert result.is_upgrade is True


def test_round_fraction_halves_up():
    assert round_fraction(Fraction(13, 2)) == Decimal("7")
    assert round_fraction(Fraction(2000, 3)) == Decimal("667")
    assert round_fraction(Fraction(0)) == Decimal("0")
