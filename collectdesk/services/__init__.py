from collectdesk.services.auth import CollectorAuthService
from collectdesk.services.batches import BatchService
from collectdesk.services.collector_data import CollectorDataService
from collectdesk.services.collectors import CollectorAdminService
from collectdesk.services.pricing import PricingService
from collectdesk.services.stats import FinanceStatsService
from collectdesk.services.submissions import SubmissionService

__all__ = [
    "CollectorAuthService",
    "BatchService",
    "CollectorDataService",
    "CollectorAdminService",
    "PricingService",
    "FinanceStatsService",
    "SubmissionService",
]
