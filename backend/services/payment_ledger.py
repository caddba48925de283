"""
Payment Ledger
==============

Paid/pending bookkeeping over the two fee tracks a subject can carry
(REGULAR membership and PT add-on), and the guard that stops a payment
from pushing a track's paid total above its final fees.

Payments without a track tag count as REGULAR. Pending amounts are signed:
an overpaid track has a negative pending amount. Clamping for display is
done by FeeCalculator.display_pending.
"""

from decimal import Decimal
from typing import Iterable, Optional

from models import FeeTotal, LedgerTotals, PaymentRecord, Track, TrackSummary
from services.fee_calculator import FeeCalculator

ZERO = Decimal("0")


class OverpaymentError(Exception):
    """A candidate payment exceeds the remaining balance of its track."""

    def __init__(self, track: Track, attempted: Decimal, remaining_balance: Decimal):
        self.track = track
        self.attempted = attempted
        self.remaining_balance = remaining_balance
        super().__init__(
            f"Payment amount ({attempted}) exceeds remaining {track.value} balance "
            f"({remaining_balance}). Maximum allowed: {max(ZERO, remaining_balance)}"
        )

    def to_dict(self) -> dict:
        return {
            "track": self.track.value,
            "attempted": str(self.attempted),
            "remaining_balance": str(self.remaining_balance),
            "message": str(self),
        }


class PaymentLedger:

    @staticmethod
    def sum_by_track(payments: Iterable[PaymentRecord], track: Track) -> Decimal:
        return sum((p.paid_amount for p in payments if p.track == track), ZERO)

    @staticmethod
    def lookup_final_fees(fee_totals: Iterable[FeeTotal], track: Track) -> Decimal:
        """Final fees owed for a track; 0 if the subject has none on that track."""
        return sum((f.final_fees for f in fee_totals if f.track == track), ZERO)

    @staticmethod
    def pending_for_track(
        fee_totals: Iterable[FeeTotal],
        payments: Iterable[PaymentRecord],
        track: Track,
    ) -> Decimal:
        return PaymentLedger.lookup_final_fees(fee_totals, track) - PaymentLedger.sum_by_track(payments, track)

    @staticmethod
    def validate_payment(
        candidate_amount: Decimal,
        track: Track,
        fee_totals: Iterable[FeeTotal],
        existing_payments: Iterable[PaymentRecord],
        excluding_payment_id: Optional[str] = None,
    ) -> None:
        """
        Check that a new or edited payment fits in the remaining balance.

        Args:
            candidate_amount: Amount being entered
            track: Track the payment is for
            fee_totals: Final fees per track
            existing_payments: Payments already recorded
            excluding_payment_id: Id of the payment being edited; its current
                amount is left out of the already-paid baseline

        Raises:
            OverpaymentError: If candidate_amount > remaining balance
        """
        baseline = [
            p for p in existing_payments
            if excluding_payment_id is None or p.id != excluding_payment_id
        ]
        remaining_balance = PaymentLedger.pending_for_track(fee_totals, baseline, track)

        # str() first so float input keeps its written value
        attempted = Decimal(str(candidate_amount))
        if attempted > remaining_balance:
            raise OverpaymentError(
                track=track,
                attempted=attempted,
                remaining_balance=remaining_balance,
            )

    @staticmethod
    def summarize_track(
        fee_totals: Iterable[FeeTotal],
        payments: Iterable[PaymentRecord],
        track: Track,
    ) -> TrackSummary:
        fee_totals = list(fee_totals)
        payments = list(payments)
        final_fees = PaymentLedger.lookup_final_fees(fee_totals, track)
        paid = PaymentLedger.sum_by_track(payments, track)
        return TrackSummary(
            track=track,
            final_fees=final_fees,
            paid=paid,
            pending=final_fees - paid,
            payment_status=FeeCalculator.payment_status(paid, final_fees),
        )

    @staticmethod
    def total_across_tracks(
        fee_totals: Iterable[FeeTotal],
        payments: Iterable[PaymentRecord],
    ) -> LedgerTotals:
        fee_totals = list(fee_totals)
        payments = list(payments)
        total_fees = sum(
            (PaymentLedger.lookup_final_fees(fee_totals, t) for t in Track), ZERO
        )
        total_paid = sum(
            (PaymentLedger.sum_by_track(payments, t) for t in Track), ZERO
        )
        return LedgerTotals(
            total_fees=total_fees,
            total_paid=total_paid,
            total_pending=total_fees - total_paid,
        )
