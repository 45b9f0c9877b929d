# Overview: Flask API routes for downloading store backups.

import io
import zipfile

from flask import Blueprint, Response, jsonify, request, send_file

from ..decorators import api_errors, get_data_service


backups_bp = Blueprint("backups", __name__, url_prefix="/api/stores/<store_id>/backup")


def backup_response(result: dict):
    """SQL exports download as text; CSV exports as a zip of their files."""
    if result["format"] == "sql":
        return Response(
            result["data"],
            mimetype="application/sql",
            headers={"Content-Disposition": f'attachment; filename="{result["filename"]}"'},
        )

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, text in result["data"].items():
            archive.writestr(name, text)
    buffer.seek(0)
    return send_file(
        buffer,
        mimetype="application/zip",
        as_attachment=True,
        download_name=result["filename"],
    )


@backups_bp.get("")
@api_errors("export store backup")
def export_store_route(store_id: str):
    """Query params: format=sql|csv (default sql)"""
    result = get_data_service().backups.export_store_data(store_id, request.args.get("format", "sql"))
    return backup_response(result)


@backups_bp.get("/stats")
@api_errors("load backup stats")
def backup_stats_route(store_id: str):
    return jsonify(get_data_service().backups.get_backup_stats(store_id)), 200
