# Overview: Flask API routes for a store's eye checkups.

from flask import Blueprint, jsonify, request

from ..decorators import api_errors, get_data_service


checkups_bp = Blueprint("checkups", __name__, url_prefix="/api/stores/<store_id>/checkups")


@checkups_bp.get("")
@api_errors("list checkups")
def list_checkups(store_id: str):
    service = get_data_service().checkups
    customer_id = request.args.get("customer_id")
    if customer_id:
        checkups = service.get_by_customer_id(store_id, customer_id)
    else:
        checkups = service.get_all(store_id)
    return jsonify([checkup.to_dict() for checkup in checkups]), 200


@checkups_bp.post("")
@api_errors("create checkup")
def create_checkup(store_id: str):
    data = request.get_json(silent=True) or {}
    checkup = get_data_service().checkups.create(store_id, data)
    return jsonify(checkup.to_dict()), 201


@checkups_bp.get("/<checkup_id>")
@api_errors("load checkup")
def get_checkup(store_id: str, checkup_id: str):
    checkup = get_data_service().checkups.get_by_id(store_id, checkup_id)
    return jsonify(checkup.to_dict()), 200


@checkups_bp.put("/<checkup_id>")
@api_errors("update checkup")
def update_checkup(store_id: str, checkup_id: str):
    data = request.get_json(silent=True) or {}
    checkup = get_data_service().checkups.update(store_id, checkup_id, data)
    return jsonify(checkup.to_dict()), 200


@checkups_bp.delete("/<checkup_id>")
@api_errors("delete checkup")
def delete_checkup(store_id: str, checkup_id: str):
    get_data_service().checkups.delete(store_id, checkup_id)
    return jsonify({"message": "Checkup deleted"}), 200
