# Overview: Flask API routes for store management; super admin writes, store reads its own.

from flask import Blueprint, jsonify, request

from ..decorators import api_errors, get_data_service


stores_bp = Blueprint("stores", __name__, url_prefix="/api/stores")


@stores_bp.get("")
@api_errors("list stores")
def list_stores():
    stores = get_data_service().stores.get_all()
    return jsonify([store.to_dict() for store in stores]), 200


@stores_bp.post("")
@api_errors("create store")
def create_store():
    data = request.get_json(silent=True) or {}
    store = get_data_service().stores.create(data)
    return jsonify(store.to_dict()), 201


@stores_bp.get("/<store_id>")
@api_errors("load store")
def get_store(store_id: str):
    store = get_data_service().stores.get_by_id(store_id)
    return jsonify(store.to_dict()), 200


@stores_bp.put("/<store_id>")
@api_errors("update store")
def update_store(store_id: str):
    data = request.get_json(silent=True) or {}
    store = get_data_service().stores.update(store_id, data)
    return jsonify(store.to_dict()), 200


@stores_bp.delete("/<store_id>")
@api_errors("delete store")
def delete_store(store_id: str):
    get_data_service().stores.delete(store_id)
    return jsonify({"message": "Store deleted"}), 200
