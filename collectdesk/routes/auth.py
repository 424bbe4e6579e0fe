from flask import Blueprint, current_app
from flask_login import login_user, logout_user, login_required

from collectdesk.errors import Unauthenticated, ValidationError, register_error_handlers
from collectdesk.models import User
from collectdesk.models.user import issue_admin_token
from collectdesk.routes.common import json_body, str_field
from collectdesk.utils import is_valid_email

bp = Blueprint("auth", __name__)
register_error_handlers(bp)


@bp.route("/login", methods=["POST"])
def login():
    """Administrator login. Returns a bearer token and starts a session."""
    body = json_body()
    email = str_field(body, "email").strip()
    password = str_field(body, "password")

    if not is_valid_email(email) or not password:
        raise ValidationError("A valid email and password are required")

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password) or not user.is_active or not user.is_admin:
        current_app.logger.info("Admin login failed for %s", email)
        raise Unauthenticated("Invalid email or password")

    login_user(user)
    return {"token": issue_admin_token(user), "user": {"id": user.id, "email": user.email}}


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return {"success": True}
