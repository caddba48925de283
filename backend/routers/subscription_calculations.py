from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from datetime import date, datetime
from decimal import Decimal
import logging

from models import (
    FeeTotal,
    PaymentRecord,
    Plan,
    RenewalType,
    SubscriptionPeriod,
    Track,
)
from services.payment_ledger import OverpaymentError
from services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculations", tags=["subscription-calculations"])

# Initialize SubscriptionService
subscription_service = SubscriptionService()


# Request Models
class StatusRequest(BaseModel):
    period: Optional[SubscriptionPeriod] = None
    now: Optional[Union[datetime, date]] = Field(default=None, description="Defaults to the current time in the configured timezone")


class BulkStatusRequest(BaseModel):
    periods: Dict[str, Optional[SubscriptionPeriod]] = Field(description="Current period per gym/member id")
    now: Optional[Union[datetime, date]] = None


class ProrationRequest(BaseModel):
    current_plan: Optional[Plan] = None
    new_plan: Plan
    period: Optional[SubscriptionPeriod] = None
    now: Optional[Union[datetime, date]] = None


class ValidatePaymentRequest(BaseModel):
    amount: Decimal = Field(gt=0, description="Payment amount being entered")
    track: Track = Track.REGULAR
    fee_totals: List[FeeTotal]
    payments: List[PaymentRecord] = []
    excluding_payment_id: Optional[str] = Field(default=None, description="Id of the payment being edited")


class LedgerSummaryRequest(BaseModel):
    fee_totals: List[FeeTotal]
    payments: List[PaymentRecord] = []


class NextPeriodRequest(BaseModel):
    previous: Optional[SubscriptionPeriod] = None
    plan: Plan
    renewal_type: RenewalType
    now: Optional[Union[datetime, date]] = None


# Endpoints
@router.post("/status")
async def get_subscription_status(request: StatusRequest):
    """Status and days remaining for one subscription period"""
    try:
        return subscription_service.get_status(request.period, request.now)
    except Exception as e:
        logger.error(f"Error resolving subscription status: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to resolve subscription status")


@router.post("/statuses")
async def get_subscription_statuses(request: BulkStatusRequest):
    """
    Statuses for a whole table of gyms/members, resolved against one snapshot
    """
    try:
        now = subscription_service.snapshot(request.now)
        return {
            "statuses": subscription_service.resolve_statuses(request.periods, now),
            "counts": subscription_service.count_statuses(request.periods.values(), now),
        }
    except Exception as e:
        logger.error(f"Error resolving subscription statuses: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to resolve subscription statuses")


@router.post("/proration")
async def preview_proration(request: ProrationRequest):
    """
    Prorated amount for a plan change, shown before the change is submitted
    """
    try:
        proration = subscription_service.preview_plan_change(
            request.current_plan, request.new_plan, request.period, request.now
        )
        return {
            "proration": proration,
            "message": subscription_service.describe_proration(proration) if proration else None,
        }
    except Exception as e:
        logger.error(f"Error calculating proration: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to calculate proration")


@router.post("/payments/validate")
async def validate_payment(request: ValidatePaymentRequest):
    """
    Check a new or edited payment against the remaining balance of its track
    """
    try:
        subscription_service.check_payment(
            request.amount,
            request.track,
            request.fee_totals,
            request.payments,
            excluding_payment_id=request.excluding_payment_id,
        )
        return {"valid": True}
    except OverpaymentError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except Exception as e:
        logger.error(f"Error validating payment: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to validate payment")


@router.post("/payments/summary")
async def get_payment_summary(request: LedgerSummaryRequest):
    """Paid/pending per track (REGULAR, PT) and combined"""
    try:
        return subscription_service.ledger_summary(request.fee_totals, request.payments)
    except Exception as e:
        logger.error(f"Error building payment summary: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to build payment summary")


@router.post("/renewals/next-period")
async def get_next_period(request: NextPeriodRequest):
    """
    Dates of the next subscription period for a purchase, renewal or plan change
    """
    try:
        return subscription_service.plan_next_period(
            request.previous, request.plan, request.renewal_type, request.now
        )
    except Exception as e:
        logger.error(f"Error planning next period: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to plan next period")
