# Overview: Flask API routes for a store's customers.

from flask import Blueprint, jsonify, request

from ..decorators import api_errors, get_data_service


customers_bp = Blueprint("customers", __name__, url_prefix="/api/stores/<store_id>/customers")


@customers_bp.get("")
@api_errors("list customers")
def list_customers(store_id: str):
    """
    List a store's customers.

    Query params:
    - phone: exact phone lookup (returns at most one customer)
    - name: case-insensitive name search
    """
    service = get_data_service().customers
    phone = request.args.get("phone")
    name = request.args.get("name")

    if phone is not None:
        customer = service.find_by_phone(store_id, phone)
        customers = [customer] if customer else []
    elif name is not None:
        customers = service.find_by_name(store_id, name)
    else:
        customers = service.get_all(store_id)

    return jsonify([customer.to_dict() for customer in customers]), 200


@customers_bp.post("")
@api_errors("create customer")
def create_customer(store_id: str):
    data = request.get_json(silent=True) or {}
    customer = get_data_service().customers.create(store_id, data)
    return jsonify(customer.to_dict()), 201


@customers_bp.get("/<customer_id>")
@api_errors("load customer")
def get_customer(store_id: str, customer_id: str):
    service = get_data_service()
    customer = service.customers.get_by_id(store_id, customer_id)
    return jsonify({
        **customer.to_dict(),
        "checkups": [c.to_dict() for c in service.checkups.get_by_customer_id(store_id, customer_id)],
        "orders": [o.to_dict(include_customer=True) for o in service.orders.get_by_customer_id(store_id, customer_id)],
    }), 200


@customers_bp.put("/<customer_id>")
@api_errors("update customer")
def update_customer(store_id: str, customer_id: str):
    data = request.get_json(silent=True) or {}
    customer = get_data_service().customers.update(store_id, customer_id, data)
    return jsonify(customer.to_dict()), 200
