"""
Domain records and derived results for subscription/ledger calculations.

Records (SubscriptionPeriod, Plan, PaymentRecord, FeeTotal) are immutable and
validated at construction, so malformed data is rejected here rather than
inside the calculators.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SubscriptionStatus(str, Enum):
    NEW = "NEW"
    ACTIVE = "ACTIVE"
    EXPIRING_SOON = "EXPIRING_SOON"
    EXPIRED = "EXPIRED"


class SubscriptionType(str, Enum):
    """Display-only classification: has the subject held a period before?"""
    NEW = "NEW"
    RENEWED = "RENEWED"


class RenewalType(str, Enum):
    """How a SubscriptionPeriod came to exist. Assigned by the caller."""
    NEW = "NEW"
    RENEWAL = "RENEWAL"
    UPGRADE = "UPGRADE"
    DOWNGRADE = "DOWNGRADE"


class RenewalTiming(str, Enum):
    EARLY = "EARLY"
    STANDARD = "STANDARD"
    LATE = "LATE"


class Track(str, Enum):
    REGULAR = "REGULAR"
    PT = "PT"


class PaymentStatus(str, Enum):
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    PENDING = "PENDING"


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


# Records

class SubscriptionPeriod(BaseModel):
    """One subscription term. A renewal or plan change creates a new record."""
    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: Optional[date] = None
    plan_id: Optional[str] = None
    renewal_type: Optional[RenewalType] = None

    @model_validator(mode="after")
    def check_date_order(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} is before start_date {self.start_date}"
            )
        return self


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    price: Decimal = Field(ge=0, description="Plan price in whole currency units")
    duration_days: int = Field(gt=0, description="Length of one term in days")
    name: Optional[str] = None


class PaymentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    purpose_track: Optional[Track] = Field(
        default=None, description="Fee track; untagged payments count as REGULAR"
    )
    paid_amount: Decimal = Field(ge=0)
    timestamp: Optional[datetime] = None

    @property
    def track(self) -> Track:
        return self.purpose_track or Track.REGULAR


class FeeTotal(BaseModel):
    model_config = ConfigDict(frozen=True)

    track: Track
    final_fees: Decimal = Field(ge=0)


# Derived results (never persisted)

class StatusResult(BaseModel):
    status: SubscriptionStatus
    days_remaining: Optional[int] = None


class StatusCounts(BaseModel):
    new: int = 0
    active: int = 0
    expiring_soon: int = 0
    expired: int = 0

    @property
    def total(self) -> int:
        return self.new + self.active + self.expiring_soon + self.expired


class ProratedAmount(BaseModel):
    """
    Proration for a mid-term plan change.

    `difference` is the unsigned magnitude; `is_upgrade` carries the sign.
    """
    days_remaining: int
    current_plan_price: Decimal
    new_plan_price: Decimal
    difference: Decimal
    is_upgrade: bool

    @property
    def signed_difference(self) -> Decimal:
        return self.difference if self.is_upgrade else -self.difference


class TrackSummary(BaseModel):
    track: Track
    final_fees: Decimal
    paid: Decimal
    pending: Decimal
    payment_status: PaymentStatus


class LedgerTotals(BaseModel):
    total_fees: Decimal
    total_paid: Decimal
    total_pending: Decimal
