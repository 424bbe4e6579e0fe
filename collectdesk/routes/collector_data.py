from flask import Blueprint

from collectdesk.errors import Unauthenticated, ValidationError, register_error_handlers
from collectdesk.routes.common import json_body
from collectdesk.services import CollectorDataService

bp = Blueprint("collector_data", __name__)
register_error_handlers(bp)


@bp.route("", methods=["POST"])
def collector_data():
    """Return the caller's own data, or settle their pending submissions."""
    body = json_body()

    token = body.get("token")
    if not token:
        raise Unauthenticated("Session token is required")
    claims = CollectorDataService.authenticate(token)

    collector_name = claims.get("collector_name")
    if not isinstance(collector_name, str) or not collector_name:
        raise Unauthenticated()

    action = body.get("action")
    if action is None or action == "fetch":
        return CollectorDataService.fetch(collector_name)

    if action == "create_batch":
        result = CollectorDataService.create_batch(collector_name)
        return {"success": True, "batch_id": result["batch_id"], "count": result["count"]}

    raise ValidationError("Invalid action")
