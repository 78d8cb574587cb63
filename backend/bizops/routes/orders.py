# Overview: Flask API routes for sales and purchase orders; parses input and returns JSON responses.

# backend/bizops/routes/orders.py
"""
Order API routes

Thin caller layer over the order processors. Business rules (non-empty
lines, counterparty role, stock) are enforced by the processors, not here.
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import sales_order_service, purchase_order_service
from ..services.errors import ValidationError
from .responses import failure_response, parse_int, result_response


sales_orders_bp = Blueprint("sales_orders", __name__, url_prefix="/api/sales-orders")
purchase_orders_bp = Blueprint("purchase_orders", __name__, url_prefix="/api/purchase-orders")


def _parse_items(data: dict) -> list[dict]:
    items = data.get("items")
    if not isinstance(items, list):
        raise ValidationError("items must be a list")

    parsed = []
    for raw in items:
        if not isinstance(raw, dict):
            raise ValidationError("each item must be an object")
        item = {
            "product_id": parse_int(raw.get("product_id"), "product_id"),
            "quantity": parse_int(raw.get("quantity"), "quantity"),
        }
        if raw.get("unit_price") is not None:
            item["unit_price"] = str(raw["unit_price"])
        parsed.append(item)
    return parsed


# =============================================================================
# SALES ORDERS
# =============================================================================

@sales_orders_bp.post("/")
def create_sales_order_route():
    """
    Create a sales order.

    Request body:
    {
        "counterparty_id": 1,
        "order_date": "2026-10-19",      (optional, defaults to now)
        "generate_invoice": true,         (optional)
        "items": [{"product_id": 3, "quantity": 2, "unit_price": "79.99"}]
    }

    Returns:
        201: Order created
        400: Invalid input
        409: Insufficient stock
        503: Transaction could not commit (retry)
        500: Server error
    """
    try:
        data = request.get_json(silent=True) or {}
        counterparty_id = parse_int(data.get("counterparty_id"), "counterparty_id")
        items = _parse_items(data)
        generate_invoice = data.get("generate_invoice", False)
        if not isinstance(generate_invoice, bool):
            raise ValidationError("generate_invoice must be true or false")

        result = sales_order_service.create_sales_order(
            counterparty_id,
            data.get("order_date"),
            items,
            generate_invoice=generate_invoice,
        )
        return result_response(result, "sales_order")

    except ValidationError as e:
        return failure_response(e)
    except Exception:
        current_app.logger.exception("Failed to create sales order")
        return jsonify({"error": "Internal server error"}), 500


@sales_orders_bp.get("/")
def list_sales_orders_route():
    status = request.args.get("status")
    orders = sales_order_service.list_sales_orders(status=status)
    return jsonify({"sales_orders": [o.to_dict(include_lines=False) for o in orders]}), 200


@sales_orders_bp.get("/<int:order_id>")
def get_sales_order_route(order_id: int):
    order = sales_order_service.get_sales_order(order_id)
    if not order:
        return jsonify({"error": "Sales order not found"}), 404

    return jsonify({
        "sales_order": order.to_dict(),
        "invoice": order.invoice.to_dict() if order.invoice else None,
    }), 200


@sales_orders_bp.get("/invoices")
def list_invoices_route():
    invoices = sales_order_service.list_invoices(status=request.args.get("status"))
    return jsonify({"invoices": [i.to_dict() for i in invoices]}), 200


# =============================================================================
# PURCHASE ORDERS
# =============================================================================

@purchase_orders_bp.post("/")
def create_purchase_order_route():
    """
    Create a purchase order. Stock is not changed until goods are received.

    Returns:
        201: Order created
        400: Invalid input
        503: Transaction could not commit (retry)
        500: Server error
    """
    try:
        data = request.get_json(silent=True) or {}
        counterparty_id = parse_int(data.get("counterparty_id"), "counterparty_id")
        items = _parse_items(data)

        result = purchase_order_service.create_purchase_order(
            counterparty_id,
            data.get("order_date"),
            items,
        )
        return result_response(result, "purchase_order")

    except ValidationError as e:
        return failure_response(e)
    except Exception:
        current_app.logger.exception("Failed to create purchase order")
        return jsonify({"error": "Internal server error"}), 500


@purchase_orders_bp.get("/")
def list_purchase_orders_route():
    orders = purchase_order_service.list_purchase_orders(status=request.args.get("status"))
    return jsonify({"purchase_orders": [o.to_dict(include_lines=False) for o in orders]}), 200


@purchase_orders_bp.get("/<int:order_id>")
def get_purchase_order_route(order_id: int):
    order = purchase_order_service.get_purchase_order(order_id)
    if not order:
        return jsonify({"error": "Purchase order not found"}), 404
    return jsonify({"purchase_order": order.to_dict()}), 200
