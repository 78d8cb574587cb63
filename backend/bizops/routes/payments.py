# Overview: Flask API routes for payments and wallets; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..services import payment_service
from ..services.errors import ValidationError
from .responses import failure_response, parse_int, result_response


payments_bp = Blueprint("payments", __name__, url_prefix="/api")


@payments_bp.post("/payments/")
def create_payment_route():
    """
    Record a payment.

    Request body:
    {
        "amount": "-150.75",            (signed: + received, - sent)
        "type": "Bank Transfer",        (Cash, Bank Transfer, Card)
        "status": "Sent",               (Received, Sent)
        "description": "Office supplies",
        "counterparty_id": 4,
        "wallet_id": 2
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        if data.get("amount") is None:
            raise ValidationError("amount required")

        result = payment_service.create_payment(
            str(data["amount"]),
            data.get("type"),
            data.get("status"),
            data.get("description"),
            parse_int(data.get("counterparty_id"), "counterparty_id"),
            parse_int(data.get("wallet_id"), "wallet_id"),
        )
        return result_response(result, "payment")

    except ValidationError as e:
        return failure_response(e)
    except Exception:
        current_app.logger.exception("Failed to create payment")
        return jsonify({"error": "Internal server error"}), 500


@payments_bp.get("/payments/")
def list_payments_route():
    wallet_id = request.args.get("wallet_id", type=int)
    payments = payment_service.list_payments(wallet_id=wallet_id)
    return jsonify({"payments": [p.to_dict() for p in payments]}), 200


@payments_bp.get("/wallets/")
def list_wallets_route():
    return jsonify({"wallets": [w.to_dict() for w in payment_service.list_wallets()]}), 200


@payments_bp.get("/wallets/<int:wallet_id>")
def get_wallet_route(wallet_id: int):
    wallet = payment_service.get_wallet(wallet_id)
    if not wallet:
        return jsonify({"error": "Wallet not found"}), 404
    return jsonify({"wallet": wallet.to_dict()}), 200
