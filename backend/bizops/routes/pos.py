# Overview: Flask API route for point-of-sale checkout.

from flask import Blueprint, request, jsonify, current_app

from ..services import pos_service
from ..services.errors import ValidationError
from .orders import _parse_items
from .responses import failure_response, result_response


pos_bp = Blueprint("pos", __name__, url_prefix="/api/pos")


@pos_bp.post("/checkout")
def checkout_route():
    """
    Counter sale for the walk-in customer, paid into the cash drawer.

    Request body:
    {
        "items": [{"product_id": 1, "quantity": 2}],
        "payment_type": "Cash"   (optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        items = _parse_items(data)

        result = pos_service.checkout(
            items,
            payment_type=data.get("payment_type") or pos_service.PAYMENT_TYPE_CASH,
        )
        return result_response(result, "receipt")

    except ValidationError as e:
        return failure_response(e)
    except Exception:
        current_app.logger.exception("Failed to complete POS checkout")
        return jsonify({"error": "Internal server error"}), 500
