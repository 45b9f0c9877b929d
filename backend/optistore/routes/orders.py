# Overview: Flask API routes for a store's glasses orders.

from flask import Blueprint, jsonify, request

from ..decorators import api_errors, get_data_service


orders_bp = Blueprint("orders", __name__, url_prefix="/api/stores/<store_id>/orders")


@orders_bp.get("")
@api_errors("list orders")
def list_orders(store_id: str):
    service = get_data_service().orders
    customer_id = request.args.get("customer_id")
    if customer_id:
        orders = service.get_by_customer_id(store_id, customer_id)
    else:
        orders = service.get_all(store_id)
    return jsonify([order.to_dict(include_customer=True) for order in orders]), 200


@orders_bp.post("")
@api_errors("create order")
def create_order(store_id: str):
    data = request.get_json(silent=True) or {}
    order = get_data_service().orders.create(store_id, data)
    return jsonify(order.to_dict(include_customer=True)), 201


@orders_bp.get("/<order_id>")
@api_errors("load order")
def get_order(store_id: str, order_id: str):
    order = get_data_service().orders.get_by_id(store_id, order_id)
    data = order.to_dict(include_customer=True)
    data["checkup"] = order.checkup.to_dict() if order.checkup else None
    return jsonify(data), 200


@orders_bp.put("/<order_id>")
@api_errors("update order")
def update_order(store_id: str, order_id: str):
    data = request.get_json(silent=True) or {}
    order = get_data_service().orders.update(store_id, order_id, data)
    return jsonify(order.to_dict(include_customer=True)), 200


@orders_bp.patch("/<order_id>/status")
@api_errors("update order status")
def update_order_status(store_id: str, order_id: str):
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        return jsonify({"error": "status required"}), 400

    order = get_data_service().orders.update_status(store_id, order_id, status)
    return jsonify(order.to_dict(include_customer=True)), 200


@orders_bp.delete("/<order_id>")
@api_errors("delete order")
def delete_order(store_id: str, order_id: str):
    get_data_service().orders.delete(store_id, order_id)
    return jsonify({"message": "Order deleted"}), 200
