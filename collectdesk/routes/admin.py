from flask import Blueprint, request

from collectdesk.errors import ValidationError, register_error_handlers
from collectdesk.models import admin_required
from collectdesk.routes.common import json_body, str_field
from collectdesk.services import (
    BatchService,
    CollectorAdminService,
    CollectorAuthService,
    FinanceStatsService,
    PricingService,
    SubmissionService,
)

bp = Blueprint("admin", __name__)
register_error_handlers(bp)


# Collectors
@bp.route("/collectors", methods=["GET"])
@admin_required
def collectors():
    """List all collectors."""
    return {"collectors": CollectorAdminService.list_collectors()}


@bp.route("/collectors/<int:id>/toggle-active", methods=["POST"])
@admin_required
def toggle_collector(id):
    collector = CollectorAdminService.toggle_active(id)
    return {"success": True, "collector": collector.to_dict()}


@bp.route("/collectors/<int:id>/password", methods=["POST"])
@admin_required
def set_collector_password(id):
    body = json_body()
    CollectorAuthService.set_password(id, str_field(body, "password"))
    return {"success": True}


@bp.route("/collectors/<int:id>", methods=["DELETE"])
@admin_required
def delete_collector(id):
    CollectorAdminService.delete(id)
    return {"success": True}


# Pricing settings
@bp.route("/settings", methods=["GET", "PUT"])
@admin_required
def settings():
    """Read or update per-submission pricing."""
    if request.method == "PUT":
        body = json_body()
        return PricingService.update(body.get("service_price"), body.get("commission_amount"))
    return PricingService.get()


# Batches
@bp.route("/batches", methods=["GET"])
@admin_required
def batches():
    collector_name = request.args.get("collector") or None
    return {"batches": [b.to_dict() for b in BatchService.list_batches(collector_name)]}


@bp.route("/batches/<int:id>/delivery", methods=["POST"])
@admin_required
def batch_delivery(id):
    """Mark a batch delivered or undelivered, cascading to its submissions."""
    body = json_body()
    delivered = body.get("delivered")
    if not isinstance(delivered, bool):
        raise ValidationError("'delivered' must be true or false")
    batch = BatchService.set_delivered(id, delivered)
    return {"success": True, "batch": batch.to_dict()}


# Submissions
@bp.route("/submissions", methods=["GET"])
@admin_required
def submissions():
    collector_name = request.args.get("collector") or None
    return {
        "submissions": [
            s.to_dict() for s in SubmissionService.list_submissions(collector_name)
        ]
    }


@bp.route("/submissions/<int:id>", methods=["DELETE"])
@admin_required
def delete_submission(id):
    SubmissionService.delete(id)
    return {"success": True}


# Stats
@bp.route("/stats", methods=["GET"])
@admin_required
def stats():
    """Financial overview and per-collector breakdown at current pricing."""
    return {
        "overview": FinanceStatsService.get_overview(),
        "collectors": FinanceStatsService.get_collector_finances(),
    }
