"""Payout arithmetic for batches.

All amounts are ``Decimal`` quantised to cents; nothing here touches
binary floats.
"""

from decimal import Decimal

from collectdesk.utils import CENTS


def settle(count: int, service_price: Decimal, commission_amount: Decimal) -> dict:
    """Return the frozen totals for *count* submissions at the given prices."""
    if count < 0:
        raise ValueError("count must not be negative")
    total = (Decimal(count) * Decimal(service_price)).quantize(CENTS)
    commission = (Decimal(count) * Decimal(commission_amount)).quantize(CENTS)
    return {
        "submissions_count": count,
        "total_amount": total,
        "commission_amount": commission,
        "net_amount": total - commission,
    }
