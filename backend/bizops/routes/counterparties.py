# Overview: Flask API routes for clients and vendors; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..models import CounterpartyRole
from ..services import counterparty_service
from ..services.errors import ValidationError
from .responses import failure_response, result_response


counterparties_bp = Blueprint("counterparties", __name__, url_prefix="/api/counterparties")


@counterparties_bp.post("/")
def create_counterparty_route():
    """
    Create a client and/or vendor.

    Request body:
    {
        "name": "Innovate Inc.",
        "roles": ["CLIENT"],            (CLIENT, VENDOR or both)
        "email": "billing@innovate.example",
        "phone": "555-0101",
        "address": "1 Main St"
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        roles = data.get("roles")
        if not isinstance(roles, list):
            raise ValidationError("roles must be a list")

        result = counterparty_service.create_counterparty(
            data.get("name"),
            roles,
            email=data.get("email"),
            phone=data.get("phone"),
            address=data.get("address"),
        )
        return result_response(result, "counterparty")

    except ValidationError as e:
        return failure_response(e)
    except Exception:
        current_app.logger.exception("Failed to create counterparty")
        return jsonify({"error": "Internal server error"}), 500


@counterparties_bp.get("/")
def list_counterparties_route():
    """Query params: role=CLIENT|VENDOR (optional)."""
    role = request.args.get("role")
    if role is not None and role.upper() not in {r.value for r in CounterpartyRole}:
        return failure_response(ValidationError("role must be CLIENT or VENDOR"))

    counterparties = counterparty_service.list_counterparties(role=role.upper() if role else None)
    return jsonify({"counterparties": [c.to_dict() for c in counterparties]}), 200


@counterparties_bp.get("/<int:counterparty_id>")
def get_counterparty_route(counterparty_id: int):
    counterparty = counterparty_service.get_counterparty(counterparty_id)
    if not counterparty:
        return jsonify({"error": "Counterparty not found"}), 404
    return jsonify({"counterparty": counterparty.to_dict()}), 200
