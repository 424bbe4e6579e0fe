import logging
from datetime import timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from collectdesk import db
from collectdesk.errors import (
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    Unauthenticated,
    Unauthorized,
    ValidationError,
)
from collectdesk.models import Collector
from collectdesk.services.passwords import hash_password, verify_password
from collectdesk.services.tokens import collector_claims, issue_token

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


class CollectorAuthService:
    """Collector login and account creation.

    Both operations are single request/response calls; ``login`` writes
    nothing, ``create`` inserts one collector row.
    """

    @staticmethod
    def login(name: str, password: str) -> dict:
        """Check a collector's credentials and mint a session token.

        Returns ``{"collector": {"id", "name"}, "token"}``.
        """
        if not name or not password:
            raise ValidationError("Name and password are required")

        collector = Collector.query.filter_by(name=name).first()
        if collector is None:
            logger.info("Login failed for unknown collector name")
            raise NotFound("Name does not exist", status=401)

        if not collector.is_active:
            logger.info("Login refused for inactive collector %s", collector.id)
            raise Forbidden()

        if not collector.has_password:
            raise Unauthenticated("No password has been set for this account")

        if not verify_password(password, collector.password_hash):
            logger.info("Login failed for collector %s: wrong password", collector.id)
            raise Unauthenticated("Wrong password")

        ttl = timedelta(hours=current_app.config["COLLECTOR_TOKEN_TTL_HOURS"])
        token = issue_token(
            collector_claims(collector, ttl=ttl),
            current_app.config["COLLECTOR_TOKEN_SECRET"],
        )
        logger.info("Collector %s logged in", collector.id)
        return {"collector": collector.to_identity(), "token": token}

    @staticmethod
    def _validate_password(password: str) -> None:
        min_length = current_app.config["COLLECTOR_MIN_PASSWORD_LENGTH"]
        if len(password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")

    @classmethod
    def create(cls, name: str, password: str, admin) -> Collector:
        """Create a collector account on behalf of an administrator."""
        if admin is None or not getattr(admin, "is_authenticated", False) or not admin.is_admin:
            raise Unauthorized()

        collector = cls.register(name, password)
        logger.info("Collector %s created by user %s", collector.id, admin.id)
        return collector

    @classmethod
    def register(cls, name: str, password: str) -> Collector:
        """Validate, hash and insert a new collector row."""
        name = (name or "").strip()
        if not name or not password:
            raise ValidationError("Name and password are required")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")
        cls._validate_password(password)

        collector = Collector(name=name, password_hash=hash_password(password))
        db.session.add(collector)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to create collector")
            raise InternalError("Could not create the collector")

        logger.info("Collector %s registered", collector.id)
        return collector

    @classmethod
    def set_password(cls, collector_id: int, password: str) -> Collector:
        """Set or reset a collector's password."""
        collector = db.session.get(Collector, collector_id)
        if collector is None:
            raise NotFound("Collector not found")
        if not password:
            raise ValidationError("Password is required")
        cls._validate_password(password)

        collector.password_hash = hash_password(password)
        db.session.commit()
        logger.info("Password updated for collector %s", collector.id)
        return collector
