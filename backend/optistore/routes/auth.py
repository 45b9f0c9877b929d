# Overview: Flask API routes for store PIN and super admin authentication.

"""
Authentication API routes

Two independent logins share one cookie-backed session:
- Store login (store_id + PIN) grants a store session for that store
- Super admin login (username + password) grants a super admin session

SECURITY:
- A failed login creates nothing and answers 401 with a generic message
- Logging out of one never ends the other; /logout ends both
"""

from flask import Blueprint, jsonify, request

from ..decorators import api_errors, get_data_service
from ..services.session_service import STORE_SESSION_KEY, SUPER_ADMIN_SESSION_KEY


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.get("/stores")
@api_errors("list store directory")
def store_directory_route():
    """Store ids and names for the login screen. No authentication."""
    service = get_data_service()
    return jsonify({"stores": service.stores.list_directory()}), 200


@auth_bp.post("/store/login")
@api_errors("log in to store")
def store_login_route():
    data = request.get_json(silent=True) or {}
    store_id = data.get("store_id")
    pin = data.get("pin")

    if not all([store_id, pin]):
        return jsonify({"error": "store_id and pin required"}), 400

    service = get_data_service()
    store_session = service.auth.login_store(str(store_id), str(pin))
    if store_session is None:
        return jsonify({"error": "Invalid store ID or PIN"}), 401

    return jsonify({"session": store_session.to_dict()}), 200


@auth_bp.post("/store/logout")
@api_errors("log out of store")
def store_logout_route():
    get_data_service().sessions.logout_store()
    return jsonify({"message": "Logged out of store"}), 200


@auth_bp.post("/store/refresh")
@api_errors("refresh store session")
def store_refresh_route():
    store_session = get_data_service().auth.refresh_store()
    if store_session is None:
        return jsonify({"error": "No active store session"}), 401
    return jsonify({"session": store_session.to_dict()}), 200


@auth_bp.post("/super-admin/login")
@api_errors("log in as super admin")
def super_admin_login_route():
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not all([username, password]):
        return jsonify({"error": "username and password required"}), 400

    service = get_data_service()
    admin_session = service.auth.login_super_admin(str(username), str(password))
    if admin_session is None:
        return jsonify({"error": "Invalid super admin credentials"}), 401

    return jsonify({"session": admin_session.to_dict()}), 200


@auth_bp.post("/super-admin/logout")
@api_errors("log out super admin")
def super_admin_logout_route():
    get_data_service().sessions.logout_super_admin()
    return jsonify({"message": "Logged out of super admin"}), 200


@auth_bp.post("/super-admin/refresh")
@api_errors("refresh super admin session")
def super_admin_refresh_route():
    admin_session = get_data_service().auth.refresh_super_admin()
    if admin_session is None:
        return jsonify({"error": "No active super admin session"}), 401
    return jsonify({"session": admin_session.to_dict()}), 200


@auth_bp.post("/logout")
@api_errors("log out")
def logout_all_route():
    get_data_service().sessions.logout_all()
    return jsonify({"message": "Logged out"}), 200


@auth_bp.get("/status")
@api_errors("load auth status")
def status_route():
    sessions = get_data_service().sessions
    status = sessions.auth_status()
    status["store_time_remaining"] = sessions.format_time_remaining(STORE_SESSION_KEY)
    status["super_admin_time_remaining"] = sessions.format_time_remaining(SUPER_ADMIN_SESSION_KEY)
    return jsonify(status), 200
