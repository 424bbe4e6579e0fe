import logging

from sqlalchemy import func

from collectdesk import db
from collectdesk.errors import NotFound
from collectdesk.models import Collector, Submission

logger = logging.getLogger(__name__)


class CollectorAdminService:
    """Administrative management of collector accounts."""

    @staticmethod
    def list_collectors() -> list[dict]:
        """All collectors, newest first, with their submission counts."""
        counts = dict(
            db.session.query(Submission.collector_name, func.count(Submission.id))
            .filter(Submission.collector_name.isnot(None))
            .group_by(Submission.collector_name)
            .all()
        )
        collectors = Collector.query.order_by(Collector.created_at.desc(), Collector.id.desc()).all()
        result = []
        for collector in collectors:
            data = collector.to_dict()
            data["submissions_count"] = counts.get(collector.name, 0)
            result.append(data)
        return result

    @staticmethod
    def _get(collector_id: int) -> Collector:
        collector = db.session.get(Collector, collector_id)
        if collector is None:
            raise NotFound("Collector not found")
        return collector

    @classmethod
    def toggle_active(cls, collector_id: int) -> Collector:
        """Flip the active flag. Deactivated collectors cannot log in."""
        collector = cls._get(collector_id)
        collector.is_active = not collector.is_active
        db.session.commit()
        logger.info("Collector %s active=%s", collector.id, collector.is_active)
        return collector

    @classmethod
    def delete(cls, collector_id: int) -> None:
        """Hard-delete a collector.

        Their submissions and batches are kept and still carry the name.
        """
        collector = cls._get(collector_id)
        db.session.delete(collector)
        db.session.commit()
        logger.info("Collector %s deleted", collector_id)
