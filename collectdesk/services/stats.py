from sqlalchemy import text

from collectdesk import db
from collectdesk.models import Settings


class FinanceStatsService:
    """Service for calculating submission and payout statistics."""

    @staticmethod
    def get_overview() -> dict:
        """
        Get overall financial statistics at current pricing.

        Returns dict with:
            - total_submissions: All submissions
            - collectors_count: All collector accounts
            - delivered_count / undelivered_count: Split on is_delivered
            - total_revenue: total_submissions x service price
            - total_commissions: total_submissions x commission
            - total_to_deliver: revenue minus commissions
            - delivered_amount / pending_amount: net amount per delivery state
        """
        pricing = Settings.get_pricing()
        net_per_submission = pricing["service_price"] - pricing["commission_amount"]

        result = db.session.execute(text("""
            SELECT
                count(*) as total,
                sum(case when is_delivered then 1 else 0 end) as delivered
            FROM submissions
        """)).fetchone()
        collectors_count = db.session.execute(text("SELECT count(*) FROM collectors")).scalar()

        total = (result.total if result else 0) or 0
        delivered = (result.delivered if result else 0) or 0
        undelivered = total - delivered

        return {
            "total_submissions": total,
            "collectors_count": collectors_count or 0,
            "delivered_count": delivered,
            "undelivered_count": undelivered,
            "service_price": pricing["service_price"],
            "commission_amount": pricing["commission_amount"],
            "total_revenue": total * pricing["service_price"],
            "total_commissions": total * pricing["commission_amount"],
            "total_to_deliver": total * net_per_submission,
            "delivered_amount": delivered * net_per_submission,
            "pending_amount": undelivered * net_per_submission,
        }

    @staticmethod
    def get_collector_finances() -> list[dict]:
        """Per-collector totals at current pricing, busiest collectors first."""
        pricing = Settings.get_pricing()
        price = pricing["service_price"]
        commission = pricing["commission_amount"]
        net_per_submission = price - commission

        sql = text("""
            SELECT
                c.name as name,
                c.is_active as is_active,
                count(s.id) as total,
                sum(case when s.is_delivered then 1 else 0 end) as delivered
            FROM collectors c
            LEFT JOIN submissions s ON s.collector_name = c.name
            GROUP BY c.id, c.name, c.is_active
            ORDER BY total DESC, c.name
        """)

        rows = []
        for row in db.session.execute(sql):
            total = row.total or 0
            delivered = row.delivered or 0
            pending = total - delivered
            rows.append({
                "name": row.name,
                "is_active": bool(row.is_active),
                "total": total,
                "delivered_count": delivered,
                "pending_count": pending,
                "commission": total * commission,
                "total_collected": total * price,
                "to_deliver": total * net_per_submission,
                "delivered": delivered * net_per_submission,
                "pending": pending * net_per_submission,
            })

        return rows
