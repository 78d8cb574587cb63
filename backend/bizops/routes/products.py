# Overview: Flask API routes for the product catalogue; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..services import products_service
from ..services.errors import ValidationError
from .responses import failure_response, parse_int, result_response


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.post("/")
def create_product_route():
    """
    Create a product.

    Request body:
    {
        "sku": "KB-4532",
        "name": "Ergo-Comfort Keyboard",
        "price": "79.99",
        "stock": 10,                    (optional, default 0)
        "category": "Peripherals",      (optional)
        "image_url": null               (optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        if data.get("price") is None:
            raise ValidationError("price required")

        result = products_service.create_product(
            sku=data.get("sku"),
            name=data.get("name"),
            price=str(data["price"]),
            stock=parse_int(data.get("stock", 0), "stock"),
            category=data.get("category"),
            image_url=data.get("image_url"),
        )
        return result_response(result, "product")

    except ValidationError as e:
        return failure_response(e)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.get("/")
def list_products_route():
    """Query params: low_stock=<int> (optional)."""
    low_stock = request.args.get("low_stock", type=int)
    products = products_service.list_products(low_stock=low_stock)
    return jsonify({"products": [p.to_dict() for p in products]}), 200


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    product = products_service.get_product(product_id)
    if not product:
        return jsonify({"error": "Product not found"}), 404
    return jsonify({"product": product.to_dict()}), 200
