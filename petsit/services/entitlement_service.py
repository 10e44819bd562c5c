"""Subscription entitlement checks.

Access is decided from the stored status label and the two optional end
dates only. Anything missing or unreadable denies access; nothing here
raises, since the result gates every protected page.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Union

from petsit.core.config import today as local_today


class EntitlementState(str, Enum):
    ACTIVE = "active"
    TRIAL = "trial"
    TRIAL_EXPIRED = "trial_expired"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    NONE = "none"


@dataclass(frozen=True)
class EntitlementRecord:
    status: str | None = None
    trial_end_date: Any = None
    subscription_end_date: Any = None

    @classmethod
    def from_user(cls, user: Any) -> "EntitlementRecord":
        return cls(
            status=getattr(user, "subscription_status", None),
            trial_end_date=getattr(user, "trial_end_date", None),
            subscription_end_date=getattr(user, "subscription_end_date", None),
        )

    @classmethod
    def from_mapping(cls, data: Mapping) -> "EntitlementRecord":
        return cls(
            status=data.get("subscription_status") or data.get("status"),
            trial_end_date=data.get("trial_end_date"),
            subscription_end_date=data.get("subscription_end_date"),
        )


class _Malformed:
    def __repr__(self) -> str:
        return "MALFORMED"


# Present but unreadable end date
MALFORMED = _Malformed()


@dataclass(frozen=True)
class NoSubscription:
    pass


@dataclass(frozen=True)
class Active:
    end_date: date | None | _Malformed = None


@dataclass(frozen=True)
class Trial:
    end_date: date | None | _Malformed = None


@dataclass(frozen=True)
class Expired:
    pass


@dataclass(frozen=True)
class Cancelled:
    pass


@dataclass(frozen=True)
class Unrecognized:
    label: str


SubscriptionState = Union[NoSubscription, Active, Trial, Expired, Cancelled, Unrecognized]


@dataclass(frozen=True)
class EntitlementDecision:
    valid: bool
    state: EntitlementState
    end_date: date | None = None


def _coerce_date(value: Any) -> date | None | _Malformed:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return MALFORMED
    return MALFORMED


def parse_state(record: EntitlementRecord) -> SubscriptionState:
    status = record.status.strip().lower() if isinstance(record.status, str) else None
    if not status:
        return NoSubscription()
    if status == "active":
        return Active(_coerce_date(record.subscription_end_date))
    if status == "trial":
        return Trial(_coerce_date(record.trial_end_date))
    if status == "expired":
        return Expired()
    if status == "cancelled":
        return Cancelled()
    return Unrecognized(status)


def _current_day(now: Any) -> date | _Malformed:
    if now is None:
        return local_today()
    day = _coerce_date(now)
    return MALFORMED if day is None else day


def _as_record(record: Any) -> EntitlementRecord:
    if isinstance(record, EntitlementRecord):
        return record
    if record is None:
        return EntitlementRecord()
    if isinstance(record, Mapping):
        return EntitlementRecord.from_mapping(record)
    return EntitlementRecord.from_user(record)


def check_entitlement(record: EntitlementRecord | Mapping | Any, now: datetime | date | str | None = None) -> EntitlementDecision:
    day = _current_day(now)
    state = parse_state(_as_record(record))
    if isinstance(day, _Malformed):
        return EntitlementDecision(valid=False, state=EntitlementState.NONE)

    if isinstance(state, NoSubscription):
        return EntitlementDecision(valid=False, state=EntitlementState.NONE)

    # Active is decided before trial whatever dates are populated
    if isinstance(state, Active):
        if state.end_date is None:
            return EntitlementDecision(valid=True, state=EntitlementState.ACTIVE)
        if isinstance(state.end_date, _Malformed):
            return EntitlementDecision(valid=False, state=EntitlementState.EXPIRED)
        if state.end_date > day:
            return EntitlementDecision(valid=True, state=EntitlementState.ACTIVE, end_date=state.end_date)
        return EntitlementDecision(valid=False, state=EntitlementState.EXPIRED, end_date=state.end_date)

    if isinstance(state, Trial):
        if isinstance(state.end_date, date) and state.end_date > day:
            return EntitlementDecision(valid=True, state=EntitlementState.TRIAL, end_date=state.end_date)
        end = state.end_date if isinstance(state.end_date, date) else None
        return EntitlementDecision(valid=False, state=EntitlementState.TRIAL_EXPIRED, end_date=end)

    if isinstance(state, Expired):
        return EntitlementDecision(valid=False, state=EntitlementState.EXPIRED)

    if isinstance(state, Cancelled):
        return EntitlementDecision(valid=False, state=EntitlementState.CANCELLED)

    return EntitlementDecision(valid=False, state=EntitlementState.NONE)


def is_entitled(record: EntitlementRecord | Mapping | Any, now: datetime | date | str | None = None) -> bool:
    return check_entitlement(record, now).valid
