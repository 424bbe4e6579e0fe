from flask import Blueprint
from flask_login import current_user

from collectdesk.errors import ValidationError, register_error_handlers
from collectdesk.routes.common import json_body, str_field
from collectdesk.services import CollectorAuthService

bp = Blueprint("collector_auth", __name__)
register_error_handlers(bp)


@bp.route("", methods=["POST"])
def collector_auth():
    """Collector login, or collector creation by an administrator."""
    body = json_body()
    action = body.get("action")

    if action == "login":
        return CollectorAuthService.login(str_field(body, "name"), str_field(body, "password"))

    if action == "create":
        CollectorAuthService.create(
            str_field(body, "name"), str_field(body, "password"), current_user
        )
        return {"success": True}

    raise ValidationError("Invalid action")
