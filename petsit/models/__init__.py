# Import all models so that SQLAlchemy registers them for metadata.create_all
from petsit.models.user import User
from petsit.models.blocked_date import BlockedDate
from petsit.models.booking import Booking
from petsit.models.audit_log import AuditLog

__all__ = [
    "User",
    "BlockedDate",
    "Booking",
    "AuditLog",
]
