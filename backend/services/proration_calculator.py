"""
Proration Calculator
====================

Computes the charge or credit for switching plans mid-term using daily rates:

    daily_rate = price / duration_days
    difference = round(|new_daily_rate - current_daily_rate| * days_remaining)

The rate difference is kept as an exact fraction and rounded once, at the
end, so an exact half unit always rounds up.

`difference` is always reported as an unsigned whole-currency magnitude;
`is_upgrade` says whether it is an additional charge (True) or a credit.
Plans guarantee duration_days > 0 at construction.
"""

from decimal import Decimal, ROUND_HALF_UP
from fractions import Fraction
from typing import Optional
import math

from models import Plan, ProratedAmount

WHOLE_UNIT = Decimal("1")


def round_currency(amount: Decimal) -> Decimal:
    """Round to the nearest whole currency unit, halves away from zero."""
    return amount.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def round_fraction(amount: Fraction) -> Decimal:
    """Round a non-negative exact fraction to whole units, halves up."""
    return Decimal(math.floor(amount + Fraction(1, 2)))


class ProrationCalculator:

    @staticmethod
    def daily_rate(plan: Plan) -> Decimal:
        return Decimal(plan.price) / Decimal(plan.duration_days)

    @staticmethod
    def compute_proration(
        current_plan: Optional[Plan],
        new_plan: Plan,
        days_remaining: int,
    ) -> Optional[ProratedAmount]:
        """
        Prorate a plan change over the days left on the current term.

        Args:
            current_plan: Plan the subject is on now (None if never paid)
            new_plan: Plan being switched to
            days_remaining: Days left on the current term

        Returns:
            ProratedAmount, or None when there is nothing to prorate
            (no current plan, or the current term has no days left).
        """
        if days_remaining <= 0 or current_plan is None:
            return None

        # Cross-multiplied daily rates: price_new/days_new vs price_cur/days_cur
        current_weighted = Fraction(current_plan.price) * new_plan.duration_days
        new_weighted = Fraction(new_plan.price) * current_plan.duration_days
        rate_gap = (new_weighted - current_weighted) / (current_plan.duration_days * new_plan.duration_days)

        difference = round_fraction(abs(rate_gap) * days_remaining)

        return ProratedAmount(
            days_remaining=days_remaining,
            current_plan_price=current_plan.price,
            new_plan_price=new_plan.price,
            difference=difference,
            is_upgrade=new_weighted > current_weighted,
        )

    @staticmethod
    def describe(proration: ProratedAmount, currency_symbol: str = "₹") -> str:
        """Confirmation text, e.g. '+₹200 additional amount' or '-₹200 credit'."""
        if proration.is_upgrade:
            return f"+{currency_symbol}{proration.difference} additional amount"
        return f"-{currency_symbol}{proration.difference} credit"
