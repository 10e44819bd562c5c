from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from petsit.core.config import get_settings, today as local_today
from petsit.db.session import SessionLocal
from petsit.models.user import User
from petsit.services.audit_service import write_audit_log


def expire_trials(db: Session, *, today: date) -> int:
    """Move users whose trial ended on or before today to expired."""
    q = select(User).where(
        User.subscription_status == "trial",
        User.trial_end_date.is_not(None),
        User.trial_end_date <= today,
    )
    targets = db.execute(q).scalars().all()

    for u in targets:
        u.subscription_status = "expired"
        db.commit()
        write_audit_log(
            db,
            actor_user_id=None,
            action_type="TRIAL_AUTO_EXPIRE",
            target_type="user",
            target_id=u.id,
            summary="Trial period ended",
            diff_json={"trial_end_date": str(u.trial_end_date)},
            request=None,
        )
    return len(targets)


def main() -> int:
    if not get_settings().auto_expire_enabled:
        print("auto_expire_disabled")
        return 0

    db = SessionLocal()
    try:
        count = expire_trials(db, today=local_today())
        if not count:
            print("no_targets")
        else:
            print(f"expired: {count}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
