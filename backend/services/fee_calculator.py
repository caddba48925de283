"""
Fee Calculator
==============

Final fees owed for a track after package discounts, and the payment status
shown next to a membership.

Business Rules:
1. Max discount: PERCENTAGE packages discount round(fees * pct / 100),
   FIXED packages discount the configured amount
2. Final fees: fees - max discount - extra discount, never below 0
3. Payment status: PAID once paid >= final fees, PARTIAL if anything paid,
   otherwise PENDING
"""

from decimal import Decimal

from models import DiscountType, FeeTotal, PaymentStatus, Track
from services.proration_calculator import round_currency

ZERO = Decimal("0")


class FeeCalculator:

    @staticmethod
    def max_discount_amount(
        package_fees: Decimal,
        max_discount: Decimal,
        discount_type: DiscountType = DiscountType.FIXED,
    ) -> Decimal:
        """
        Discount amount a package allows.

        Args:
            package_fees: List price of the package
            max_discount: Percentage (0-100) or fixed amount, per discount_type
            discount_type: How max_discount is expressed

        Returns:
            Decimal: Discount in currency units
        """
        if discount_type == DiscountType.PERCENTAGE:
            return round_currency(Decimal(package_fees) * Decimal(max_discount) / Decimal(100))
        return Decimal(max_discount)

    @staticmethod
    def final_fees(
        package_fees: Decimal,
        max_discount: Decimal = ZERO,
        extra_discount: Decimal = ZERO,
    ) -> Decimal:
        return max(ZERO, Decimal(package_fees) - Decimal(max_discount) - Decimal(extra_discount))

    @staticmethod
    def fee_total(
        track: Track,
        package_fees: Decimal,
        max_discount: Decimal = ZERO,
        extra_discount: Decimal = ZERO,
    ) -> FeeTotal:
        """Build the FeeTotal fixed at purchase/renewal time for a track."""
        return FeeTotal(
            track=track,
            final_fees=FeeCalculator.final_fees(package_fees, max_discount, extra_discount),
        )

    @staticmethod
    def payment_status(paid: Decimal, final_fees: Decimal) -> PaymentStatus:
        if paid >= final_fees:
            return PaymentStatus.PAID
        if paid > 0:
            return PaymentStatus.PARTIAL
        return PaymentStatus.PENDING

    @staticmethod
    def display_pending(pending: Decimal) -> Decimal:
        """Pending amount as shown to users: overpayment displays as 0 due."""
        return max(ZERO, pending)
