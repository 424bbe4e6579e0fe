from collectdesk.models.user import User, UserRole, admin_required
from collectdesk.models.collector import Collector
from collectdesk.models.submission import Submission
from collectdesk.models.batch import Batch
from collectdesk.models.settings import Settings

__all__ = [
    "User",
    "UserRole",
    "admin_required",
    "Collector",
    "Submission",
    "Batch",
    "Settings",
]
