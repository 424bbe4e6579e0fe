import logging

from collectdesk import db
from collectdesk.errors import NotFound
from collectdesk.models import Batch, Submission

logger = logging.getLogger(__name__)


class BatchService:
    """Administrative view of payout batches."""

    @staticmethod
    def list_batches(collector_name: str | None = None) -> list[Batch]:
        query = Batch.query
        if collector_name:
            query = query.filter_by(collector_name=collector_name)
        return query.order_by(Batch.created_at.desc(), Batch.id.desc()).all()

    @staticmethod
    def set_delivered(batch_id: int, delivered: bool) -> Batch:
        """Mark a batch delivered or undelivered.

        The flag cascades to every member submission in the same commit,
        so a delivered submission always sits in a delivered batch.
        """
        batch = db.session.get(Batch, batch_id)
        if batch is None:
            raise NotFound("Batch not found")

        batch.is_delivered = delivered
        batch.delivered_at = db.func.now() if delivered else None
        Submission.query.filter_by(batch_id=batch.id).update(
            {Submission.is_delivered: delivered}, synchronize_session=False
        )
        db.session.commit()

        logger.info("Batch %s delivered=%s", batch.id, delivered)
        return batch
