from datetime import date, datetime, timezone

import pytest

from petsit.services.billing_sync import apply_subscription_update, epoch_to_date, map_provider_status, mark_subscription_deleted
from petsit.services.entitlement_service import EntitlementRecord, is_entitled


@pytest.mark.parametrize(
    "provider, local",
    [
        ("trialing", "trial"),
        ("canceled", "cancelled"),
        ("unpaid", "cancelled"),
        ("past_due", "expired"),
        ("active", "active"),
        ("incomplete", "active"),
        (None, "active"),
    ],
)
def test_map_provider_status(provider, local):
    assert map_provider_status(provider) == local


def test_epoch_to_date():
    ts = int(datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc).timestamp())
    assert epoch_to_date(ts) == date(2025, 7, 1)
    assert epoch_to_date(str(ts)) == date(2025, 7, 1)
    assert epoch_to_date(None) is None
    assert epoch_to_date(0) is None
    assert epoch_to_date("soon") is None
    assert epoch_to_date(10**20) is None


def test_apply_subscription_update_keeps_existing_dates_when_missing(db, sitter):
    sitter.trial_end_date = date(2025, 5, 1)
    db.commit()

    ts = int(datetime(2025, 9, 1, tzinfo=timezone.utc).timestamp())
    apply_subscription_update(db, user=sitter, provider_status="active", current_period_end=ts, trial_end=None, subscription_id="sub_1", customer_id="cus_1")

    assert sitter.subscription_status == "active"
    assert sitter.subscription_end_date == date(2025, 9, 1)
    assert sitter.trial_end_date == date(2025, 5, 1)
    assert sitter.stripe_subscription_id == "sub_1"
    assert sitter.stripe_customer_id == "cus_1"
    assert is_entitled(EntitlementRecord.from_user(sitter), date(2025, 8, 1))


def test_mark_subscription_deleted(db, sitter):
    sitter.subscription_status = "active"
    sitter.stripe_subscription_id = "sub_1"
    db.commit()

    mark_subscription_deleted(db, user=sitter)
    assert sitter.subscription_status == "cancelled"
    assert sitter.stripe_subscription_id is None
    assert not is_entitled(EntitlementRecord.from_user(sitter), date(2025, 8, 1))
