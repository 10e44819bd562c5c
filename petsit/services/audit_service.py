from __future__ import annotations

from typing import Any, Mapping

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from petsit.models.audit_log import AuditLog

# Personal and billing identifiers never land in audit payloads
REDACTED_KEYS = {"email", "name", "phone", "message", "sitter_response"}
REDACTED_PREFIXES = ("stripe_",)


def _redact(key: str) -> bool:
    return key in REDACTED_KEYS or key.startswith(REDACTED_PREFIXES)


def _sanitize(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {k: "<redacted>" if _redact(str(k)) else _sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize(v) for v in obj]
    return obj


def _client_meta(request: Request | None) -> tuple[str, str]:
    if request is None:
        return "", ""
    ip = request.client.host if request.client else ""
    return ip, request.headers.get("user-agent", "")[:255]


def write_audit_log(
    db: Session,
    *,
    actor_user_id: str | None,
    action_type: str,
    target_type: str = "",
    target_id: str = "",
    summary: str = "",
    diff_json: Mapping[str, Any] | None = None,
    request: Request | None = None,
) -> AuditLog:
    ip, ua = _client_meta(request)
    log = AuditLog(
        actor_user_id=actor_user_id,
        action_type=action_type.upper(),
        target_type=target_type,
        target_id=str(target_id),
        summary=summary[:255],
        diff_json=_sanitize(diff_json) if diff_json is not None else None,
        ip_address=ip,
        user_agent=ua,
    )
    db.add(log)
    db.commit()
    return log


def list_audit_logs(db: Session, *, target_type: str, target_id: str) -> list[AuditLog]:
    q = (
        select(AuditLog)
        .where(AuditLog.target_type == target_type, AuditLog.target_id == target_id)
        .order_by(AuditLog.created_at.asc())
    )
    return list(db.execute(q).scalars().all())
