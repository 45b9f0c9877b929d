# Overview: Flask API routes for a store's sales reports and dashboard.

from flask import Blueprint, jsonify, request

from ..decorators import api_errors, get_data_service
from ..services.errors import ValidationError
from ..time_utils import parse_date


reports_bp = Blueprint("reports", __name__, url_prefix="/api/stores/<store_id>/reports")


@reports_bp.get("/sales")
@api_errors("build sales report")
def sales_report_route(store_id: str):
    """
    Per-day sales totals.

    Query params: start, end (YYYY-MM-DD or DD/MM/YYYY, inclusive)
    """
    reports = get_data_service().reports
    rows = reports.sales_report(store_id, request.args.get("start"), request.args.get("end"))
    return jsonify({"rows": rows, "summary": reports.summarize(rows)}), 200


@reports_bp.get("/orders")
@api_errors("build orders report")
def orders_report_route(store_id: str):
    reports = get_data_service().reports
    rows = reports.individual_orders_report(store_id, request.args.get("start"), request.args.get("end"))
    return jsonify({"rows": rows, "summary": reports.summarize(rows)}), 200


@reports_bp.get("/dashboard")
@api_errors("build dashboard")
def dashboard_route(store_id: str):
    day = request.args.get("date")
    try:
        day = parse_date(day)
    except (ValueError, OverflowError):
        raise ValidationError("date must be a date (YYYY-MM-DD or DD/MM/YYYY)", field="date")
    return jsonify(get_data_service().reports.dashboard(store_id, day)), 200
