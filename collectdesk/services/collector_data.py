import logging

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from collectdesk import db
from collectdesk.errors import InternalError, NothingToBatch
from collectdesk.models import Batch, Settings, Submission
from collectdesk.services.settlement import settle
from collectdesk.services.tokens import load_token

logger = logging.getLogger(__name__)


class CollectorDataService:
    """Read and settle a single collector's own submissions.

    Every method is scoped to the collector name taken from a verified
    session token; there is no way to reach another collector's rows.
    """

    @staticmethod
    def authenticate(token) -> dict:
        """Verify a session token and return its claims.

        Raises ``Unauthenticated`` or ``SessionExpired``.
        """
        return load_token(token, current_app.config["COLLECTOR_TOKEN_SECRET"])

    @staticmethod
    def fetch(collector_name: str) -> dict:
        """Return the collector's submissions, batches and current pricing."""
        try:
            submissions = (
                Submission.query.filter_by(collector_name=collector_name)
                .order_by(Submission.created_at.desc(), Submission.id.desc())
                .all()
            )
            batches = (
                Batch.query.filter_by(collector_name=collector_name)
                .order_by(Batch.created_at.desc(), Batch.id.desc())
                .all()
            )
            pricing = Settings.get_pricing()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to load data for collector")
            raise InternalError("Could not load your data")

        return {
            "collector_name": collector_name,
            "submissions": [s.to_dict() for s in submissions],
            "batches": [b.to_dict() for b in batches],
            "total": len(submissions),
            "service_price": pricing["service_price"],
            "commission_amount": pricing["commission_amount"],
        }

    @staticmethod
    def _pending_submission_ids(collector_name: str) -> list[int]:
        """Ids of the collector's undelivered submissions not yet in a batch."""
        rows = (
            db.session.query(Submission.id)
            .filter(
                Submission.collector_name == collector_name,
                Submission.batch_id.is_(None),
                Submission.is_delivered == db.false(),
            )
            .order_by(Submission.id)
            .all()
        )
        return [row.id for row in rows]

    @classmethod
    def create_batch(cls, collector_name: str) -> dict:
        """Close out the collector's pending submissions into a new batch.

        The pre-read only nominates candidates.  Rows are claimed with a
        conditional UPDATE that still requires ``batch_id IS NULL``, and the
        totals are computed from the number of rows actually claimed, so two
        concurrent calls can never count the same submission twice.  The
        batch insert and the claim share one transaction; if the claim fails
        nothing is committed and the call can simply be retried.
        """
        try:
            candidate_ids = cls._pending_submission_ids(collector_name)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to read pending submissions")
            raise InternalError()

        if not candidate_ids:
            raise NothingToBatch()

        try:
            pricing = Settings.get_pricing()

            batch = Batch(collector_name=collector_name, is_delivered=False, **settle(0, 0, 0))
            db.session.add(batch)
            db.session.flush()

            result = db.session.execute(
                update(Submission)
                .where(
                    Submission.id.in_(candidate_ids),
                    Submission.collector_name == collector_name,
                    Submission.batch_id.is_(None),
                    Submission.is_delivered == db.false(),
                )
                .values(batch_id=batch.id)
                .execution_options(synchronize_session=False)
            )
            claimed = result.rowcount

            if claimed <= 0:
                db.session.rollback()
            else:
                for field, value in settle(
                    claimed, pricing["service_price"], pricing["commission_amount"]
                ).items():
                    setattr(batch, field, value)
                db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to create batch")
            raise InternalError("Could not create the batch, please try again")

        if claimed <= 0:
            # Another request claimed every candidate first
            logger.warning(
                "Batch claim for %s found %d candidates but claimed none",
                collector_name,
                len(candidate_ids),
            )
            raise NothingToBatch()

        if claimed != len(candidate_ids):
            logger.warning(
                "Batch %s claimed %d of %d candidates", batch.id, claimed, len(candidate_ids)
            )
        logger.info("Batch %s created for %s with %d submissions", batch.id, collector_name, claimed)
        return {"batch_id": batch.id, "count": claimed}
