from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class EntitlementOut(BaseModel):
    user_id: str
    is_valid: bool
    status: str
    end_date: date | None = None


class SubscriptionEventIn(BaseModel):
    """Subscription snapshot forwarded by the billing webhook handler."""

    type: str  # customer.subscription.updated, customer.subscription.deleted, ...
    user_id: str | None = None
    customer_id: str | None = None
    subscription_id: str | None = None
    status: str | None = None
    current_period_end: int | None = None
    trial_end: int | None = None
