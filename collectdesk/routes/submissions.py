from flask import Blueprint, current_app

from collectdesk.errors import register_error_handlers
from collectdesk.routes.common import json_body
from collectdesk.services import CollectorDataService, SubmissionService

bp = Blueprint("submissions", __name__)
register_error_handlers(bp)


@bp.route("", methods=["POST"])
def create():
    """Public submission form.

    With a collector session token the record is attributed to that
    collector; without one it is left unattributed.
    """
    body = json_body()

    collector_name = None
    token = body.get("token")
    if token:
        claims = CollectorDataService.authenticate(token)
        collector_name = claims.get("collector_name")

    submission = SubmissionService.create(
        body.get("full_name"), body.get("phone_number"), collector_name=collector_name
    )
    current_app.logger.info("Submission %s recorded", submission.id)
    return {"success": True, "id": submission.id}, 201
