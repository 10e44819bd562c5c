from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from petsit.core.deps import get_db
from petsit.models.user import User
from petsit.schemas.entitlement import EntitlementOut, SubscriptionEventIn
from petsit.services.audit_service import write_audit_log
from petsit.services.billing_sync import apply_subscription_update, mark_subscription_deleted
from petsit.services.entitlement_service import EntitlementRecord, check_entitlement

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users/{user_id}/entitlement", response_model=EntitlementOut)
def get_entitlement(user_id: str, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Not found")

    decision = check_entitlement(EntitlementRecord.from_user(user))
    return EntitlementOut(user_id=user.id, is_valid=decision.valid, status=decision.state.value, end_date=decision.end_date)


def _find_user(db: Session, payload: SubscriptionEventIn) -> User | None:
    if payload.user_id:
        return db.get(User, payload.user_id)
    if payload.customer_id:
        return db.execute(select(User).where(User.stripe_customer_id == payload.customer_id)).scalar_one_or_none()
    return None


@router.post("/billing/subscription-events")
def subscription_event(payload: SubscriptionEventIn, request: Request, db: Session = Depends(get_db)):
    user = _find_user(db, payload)
    if user is None:
        logger.warning("%s: no user for customer %s", payload.type, payload.customer_id)
        raise HTTPException(status_code=404, detail="User not found")

    if payload.type == "customer.subscription.deleted":
        mark_subscription_deleted(db, user=user)
    elif payload.type in ("checkout.session.completed", "customer.subscription.created", "customer.subscription.updated"):
        apply_subscription_update(
            db,
            user=user,
            provider_status=payload.status,
            current_period_end=payload.current_period_end,
            trial_end=payload.trial_end,
            subscription_id=payload.subscription_id,
            customer_id=payload.customer_id,
        )
    elif payload.type == "invoice.paid":
        apply_subscription_update(
            db,
            user=user,
            provider_status="active",
            current_period_end=payload.current_period_end,
            subscription_id=payload.subscription_id,
        )
    else:
        logger.info("Unhandled subscription event type: %s", payload.type)
        return {"received": True, "handled": False}

    write_audit_log(
        db,
        actor_user_id=None,
        action_type="SUBSCRIPTION_SYNC",
        target_type="user",
        target_id=user.id,
        summary=f"Subscription event {payload.type}",
        diff_json={"status": user.subscription_status},
        request=request,
    )
    return {"received": True, "handled": True}
