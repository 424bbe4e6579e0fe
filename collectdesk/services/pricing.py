import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from collectdesk import db
from collectdesk.errors import InternalError, ValidationError
from collectdesk.models import Settings
from collectdesk.utils import parse_money

logger = logging.getLogger(__name__)

# Batch amounts are Numeric(12, 2); at this price a batch can still hold
# 99,999 submissions without overflowing the column.
MAX_SERVICE_PRICE = Decimal("100000.00")


class PricingService:
    """Per-submission service price and collector commission."""

    @staticmethod
    def get() -> dict:
        return Settings.get_pricing()

    @staticmethod
    def update(service_price, commission_amount) -> dict:
        """Validate and save new pricing.

        The price must be positive and the commission non-negative and
        strictly below the price, and the price is capped at
        ``MAX_SERVICE_PRICE``. Existing batches keep the amounts they
        were created with.
        """
        price = parse_money(service_price)
        commission = parse_money(commission_amount)

        if price is None or price <= 0:
            raise ValidationError("Service price must be a positive number")
        if price > MAX_SERVICE_PRICE:
            raise ValidationError(f"Service price must not exceed {MAX_SERVICE_PRICE}")
        if commission is None or commission < 0:
            raise ValidationError("Commission must be a valid number")
        if commission >= price:
            raise ValidationError("Commission must be less than the service price")

        try:
            Settings.save_pricing(price, commission)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to save pricing")
            raise InternalError("Could not save the settings")

        logger.info("Pricing updated: price=%s commission=%s", price, commission)
        return {"service_price": price, "commission_amount": commission}
