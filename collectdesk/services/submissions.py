import logging

from sqlalchemy.exc import SQLAlchemyError

from collectdesk import db
from collectdesk.errors import InternalError, NotFound, ValidationError
from collectdesk.models import Submission
from collectdesk.utils import is_valid_full_name, is_valid_phone

logger = logging.getLogger(__name__)


class SubmissionService:
    """Intake and removal of collected records."""

    @staticmethod
    def create(full_name, phone_number, collector_name: str | None = None) -> Submission:
        """Record a new, unbatched submission."""
        if not isinstance(full_name, str) or not is_valid_full_name(full_name):
            raise ValidationError("Name must be between 2 and 100 characters")
        if not isinstance(phone_number, str) or not is_valid_phone(phone_number):
            raise ValidationError("Phone number is not valid")

        submission = Submission(
            full_name=full_name.strip(),
            phone_number=phone_number.strip(),
            collector_name=collector_name,
            is_delivered=False,
        )
        db.session.add(submission)
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to save submission")
            raise InternalError("Could not save the submission, please try again")
        return submission

    @staticmethod
    def list_submissions(collector_name: str | None = None) -> list[Submission]:
        """All submissions, newest first, optionally for one collector."""
        query = Submission.query
        if collector_name:
            query = query.filter_by(collector_name=collector_name)
        return query.order_by(Submission.created_at.desc(), Submission.id.desc()).all()

    @staticmethod
    def delete(submission_id: int) -> None:
        submission = db.session.get(Submission, submission_id)
        if submission is None:
            raise NotFound("Submission not found")
        db.session.delete(submission)
        db.session.commit()
        logger.info("Submission %s deleted", submission_id)
