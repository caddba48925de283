"""
Subscription Service - Entry Point for Subscription & Ledger Calculations
==========================================================================

Composes the status resolver, proration calculator, payment ledger and
renewal calculator over records the host application has already fetched.
No persistence: every value returned is derived and must be recomputed on
each read.

Each call takes a single `now` snapshot (local time in config.TIMEZONE
unless supplied) so that all
rows of a multi-row computation are compared against the same instant.
"""

from datetime import datetime
from zoneinfo import ZoneInfo
from decimal import Decimal
from typing import Dict, Iterable, Optional
import logging

import config
from models import (
    FeeTotal,
    PaymentRecord,
    Plan,
    ProratedAmount,
    RenewalType,
    StatusCounts,
    StatusResult,
    SubscriptionPeriod,
    SubscriptionStatus,
    Track,
)
from services.payment_ledger import OverpaymentError, PaymentLedger
from services.proration_calculator import ProrationCalculator
from services.renewal_calculator import RenewalCalculator
from services.subscription_status_resolver import DateLike, SubscriptionStatusResolver

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Single entry point for subscription status, plan-change and payment
    calculations. Routers use this service rather than the calculators.
    """

    def __init__(
        self,
        expiring_soon_threshold_days: int = config.EXPIRING_SOON_THRESHOLD_DAYS,
        early_renewal_threshold_days: int = config.EARLY_RENEWAL_THRESHOLD_DAYS,
        currency_symbol: str = config.CURRENCY_SYMBOL,
    ):
        self.expiring_soon_threshold_days = expiring_soon_threshold_days
        self.early_renewal_threshold_days = early_renewal_threshold_days
        self.currency_symbol = currency_symbol

    @staticmethod
    def snapshot(now: Optional[DateLike] = None) -> DateLike:
        return now if now is not None else datetime.now(ZoneInfo(config.TIMEZONE))

    def get_status(
        self,
        period: Optional[SubscriptionPeriod],
        now: Optional[DateLike] = None,
    ) -> StatusResult:
        return SubscriptionStatusResolver.resolve_status(
            period, self.snapshot(now), self.expiring_soon_threshold_days
        )

    def resolve_statuses(
        self,
        periods_by_id: Dict[str, Optional[SubscriptionPeriod]],
        now: Optional[DateLike] = None,
    ) -> Dict[str, StatusResult]:
        """
        Resolve statuses for a table of subjects (gyms or members).

        Args:
            periods_by_id: Current period per subject id (None = never subscribed)
            now: Snapshot shared by every row

        Returns:
            dict: StatusResult per subject id
        """
        now = self.snapshot(now)
        return {
            subject_id: self.get_status(period, now)
            for subject_id, period in periods_by_id.items()
        }

    def count_statuses(
        self,
        periods: Iterable[Optional[SubscriptionPeriod]],
        now: Optional[DateLike] = None,
    ) -> StatusCounts:
        now = self.snapshot(now)
        counts = StatusCounts()
        for period in periods:
            status = self.get_status(period, now).status
            if status == SubscriptionStatus.NEW:
                counts.new += 1
            elif status == SubscriptionStatus.ACTIVE:
                counts.active += 1
            elif status == SubscriptionStatus.EXPIRING_SOON:
                counts.expiring_soon += 1
            else:
                counts.expired += 1
        return counts

    def preview_plan_change(
        self,
        current_plan: Optional[Plan],
        new_plan: Plan,
        period: Optional[SubscriptionPeriod],
        now: Optional[DateLike] = None,
    ) -> Optional[ProratedAmount]:
        """
        Proration shown in the confirmation dialog before a plan change.

        Returns None when there is nothing to prorate (no current plan,
        never subscribed, or the current term has ended).
        """
        status = self.get_status(period, now)

        if status.status in (SubscriptionStatus.NEW, SubscriptionStatus.EXPIRED):
            logger.info(f"[PRORATION] No proration for {status.status.value} subscription, treat as fresh purchase")
            return None

        proration = ProrationCalculator.compute_proration(
            current_plan, new_plan, status.days_remaining
        )

        if proration:
            logger.info(
                f"[PRORATION] {current_plan.id} -> {new_plan.id}: {status.days_remaining} days remaining, "
                f"{'upgrade' if proration.is_upgrade else 'downgrade'} difference {proration.difference}"
            )
        return proration

    def describe_proration(self, proration: ProratedAmount) -> str:
        return ProrationCalculator.describe(proration, self.currency_symbol)

    def check_payment(
        self,
        candidate_amount: Decimal,
        track: Track,
        fee_totals: Iterable[FeeTotal],
        existing_payments: Iterable[PaymentRecord],
        excluding_payment_id: Optional[str] = None,
    ) -> None:
        """
        Validate a payment before it is recorded.

        Raises:
            OverpaymentError: Propagated unchanged to the caller
        """
        try:
            PaymentLedger.validate_payment(
                candidate_amount,
                track,
                fee_totals,
                existing_payments,
                excluding_payment_id=excluding_payment_id,
            )
        except OverpaymentError as e:
            logger.warning(
                f"[PAYMENT CHECK] Rejected {track.value} payment of {e.attempted}, "
                f"remaining balance {e.remaining_balance}"
                + (f" (editing {excluding_payment_id})" if excluding_payment_id else "")
            )
            raise

        logger.debug(f"[PAYMENT CHECK] Accepted {track.value} payment of {candidate_amount}")

    def ledger_summary(
        self,
        fee_totals: Iterable[FeeTotal],
        payments: Iterable[PaymentRecord],
    ) -> dict:
        fee_totals = list(fee_totals)
        payments = list(payments)
        tracks = [
            PaymentLedger.summarize_track(fee_totals, payments, track) for track in Track
        ]
        return {
            "tracks": tracks,
            "totals": PaymentLedger.total_across_tracks(fee_totals, payments),
        }

    def plan_next_period(
        self,
        previous: Optional[SubscriptionPeriod],
        plan: Plan,
        renewal_type: RenewalType,
        now: Optional[DateLike] = None,
    ) -> dict:
        """New period for a purchase/renewal/change, plus its renewal timing."""
        now = self.snapshot(now)
        period = RenewalCalculator.build_next_period(previous, plan, renewal_type, now)
        timing = RenewalCalculator.classify_renewal_timing(
            previous.end_date if previous else None,
            now,
            self.early_renewal_threshold_days,
        )

        logger.info(
            f"[RENEWAL] {renewal_type.value} to plan {plan.id}: {period.start_date} -> {period.end_date} ({timing.value})"
        )
        return {
            "period": period,
            "renewal_timing": timing,
            "subscription_type": SubscriptionStatusResolver.classify_subscription_type(previous is not None),
        }
