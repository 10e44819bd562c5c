from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from petsit.models.user import User

logger = logging.getLogger(__name__)

# Payment processor subscription status -> local subscription_status
PROVIDER_STATUS_MAP = {
    "trialing": "trial",
    "canceled": "cancelled",
    "unpaid": "cancelled",
    "past_due": "expired",
}


def map_provider_status(provider_status: str | None) -> str:
    return PROVIDER_STATUS_MAP.get((provider_status or "").lower(), "active")


def epoch_to_date(timestamp: Any) -> date | None:
    """Convert a unix timestamp to a UTC calendar date; None when absent or invalid."""
    if not timestamp or isinstance(timestamp, bool):
        return None
    try:
        return datetime.fromtimestamp(int(timestamp), tz=timezone.utc).date()
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def apply_subscription_update(
    db: Session,
    *,
    user: User,
    provider_status: str | None,
    current_period_end: Any = None,
    trial_end: Any = None,
    subscription_id: str | None = None,
    customer_id: str | None = None,
) -> User:
    """Write a processor subscription snapshot onto the user's entitlement fields.

    Dates are only overwritten when the incoming value is valid.
    """
    status = map_provider_status(provider_status)
    user.subscription_status = status

    sub_end = epoch_to_date(current_period_end)
    if sub_end:
        user.subscription_end_date = sub_end
    trial_end_date = epoch_to_date(trial_end)
    if trial_end_date:
        user.trial_end_date = trial_end_date

    if subscription_id:
        user.stripe_subscription_id = subscription_id
    if customer_id:
        user.stripe_customer_id = customer_id

    db.commit()
    db.refresh(user)
    logger.info("Subscription for user %s is now %s", user.id, status)
    return user


def mark_subscription_deleted(db: Session, *, user: User) -> User:
    user.subscription_status = "cancelled"
    user.stripe_subscription_id = None
    db.commit()
    db.refresh(user)
    logger.info("Subscription for user %s cancelled", user.id)
    return user
