# Overview: Flask API routes for the super admin's cross-store views.

"""
Super admin API routes

Read-only views across every store. All data mutations go through the
store-scoped routes, which the super admin cannot use for writes.

store_ids query param:
- absent        -> every store
- empty string  -> no stores selected (empty result)
- "a,b"         -> stores a and b
"""

from flask import Blueprint, jsonify, request

from ..decorators import api_errors, get_data_service
from ..services.reporting_service import summarize
from .backups import backup_response


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


def _store_ids_arg() -> list[str] | None:
    raw = request.args.get("store_ids")
    if raw is None:
        return None
    return [part.strip() for part in raw.split(",") if part.strip()]


@admin_bp.get("/customers")
@api_errors("list all customers")
def all_customers_route():
    return jsonify(get_data_service().admin.get_all_customers()), 200


@admin_bp.get("/checkups")
@api_errors("list all checkups")
def all_checkups_route():
    return jsonify(get_data_service().admin.get_all_checkups()), 200


@admin_bp.get("/orders")
@api_errors("list all orders")
def all_orders_route():
    return jsonify(get_data_service().admin.get_all_orders()), 200


@admin_bp.get("/reports/orders")
@api_errors("build cross-store orders report")
def orders_report_route():
    rows = get_data_service().admin.get_individual_orders_report(
        request.args.get("start"),
        request.args.get("end"),
        _store_ids_arg(),
    )
    return jsonify({"rows": rows, "summary": summarize(rows)}), 200


@admin_bp.get("/reports/sales-by-store")
@api_errors("build sales by store report")
def sales_by_store_route():
    rows = get_data_service().admin.sales_report_by_store(
        request.args.get("start"),
        request.args.get("end"),
        _store_ids_arg(),
    )
    return jsonify({"rows": rows, "summary": summarize(rows)}), 200


@admin_bp.get("/reports/consolidated")
@api_errors("build consolidated sales report")
def consolidated_route():
    rows = get_data_service().admin.consolidated_sales_report(
        request.args.get("start"),
        request.args.get("end"),
        _store_ids_arg(),
    )
    return jsonify({"rows": rows, "summary": summarize(rows)}), 200


@admin_bp.get("/stores/summary")
@api_errors("build store summaries")
def store_summaries_route():
    return jsonify(get_data_service().admin.store_summaries()), 200


@admin_bp.get("/backup")
@api_errors("export full backup")
def export_all_route():
    result = get_data_service().backups.export_all_data(request.args.get("format", "sql"))
    return backup_response(result)


@admin_bp.get("/backup/stats")
@api_errors("load full backup stats")
def all_backup_stats_route():
    return jsonify(get_data_service().backups.get_all_backup_stats()), 200
