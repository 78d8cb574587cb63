# backend/bizops/services/products_service.py
"""
Product catalogue.

Stock only changes through order processing after creation; the opening
stock is set here.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Product
from ..money import CENT, MoneyInput, to_decimal
from .concurrency import run_unit_of_work
from .errors import ServiceResult, ValidationError

# Product.price is NUMERIC(12, 2)
MAX_PRICE = to_decimal("9999999999.99")


def _validate_price(price: MoneyInput):
    try:
        value = to_decimal(price)
    except ValueError:
        raise ValidationError("price must be a number", details={"price": str(price)})
    if value <= 0:
        raise ValidationError("price must be positive", details={"price": str(value)})
    if value > MAX_PRICE:
        raise ValidationError("price is too large", details={"price": str(value)})
    if value != value.quantize(CENT):
        raise ValidationError("price cannot have more than two decimal places", details={"price": str(value)})
    return value


def create_product(
    *,
    sku: str,
    name: str,
    price: MoneyInput,
    stock: int = 0,
    category: str | None = None,
    image_url: str | None = None,
) -> ServiceResult[Product]:
    """
    Create a product.

    A blank sku or name, a duplicate sku, a non-positive price or negative
    stock comes back as a ValidationError failure.
    """
    def _op():
        if not isinstance(sku, str) or not sku.strip():
            raise ValidationError("sku is required")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name is required")
        if not isinstance(stock, int) or isinstance(stock, bool) or stock < 0:
            raise ValidationError("stock must be a whole number of at least 0", details={"stock": stock})
        value = _validate_price(price)

        clean_sku = sku.strip()
        existing = db.session.query(Product.id).filter_by(sku=clean_sku).first()
        if existing:
            raise ValidationError(f"SKU {clean_sku} already exists", details={"sku": clean_sku})

        product = Product(
            sku=clean_sku,
            name=name.strip(),
            price=value,
            stock=stock,
            category=category,
            image_url=image_url,
        )
        db.session.add(product)
        db.session.flush()
        return product

    result = run_unit_of_work(_op, operation="create_product")
    if result.ok:
        current_app.logger.info("Created product %s (%s)", result.value.sku, result.value.id)
    return result


def get_product(product_id: int) -> Product | None:
    return db.session.get(Product, product_id)


def list_products(low_stock: int | None = None) -> list[Product]:
    """All products by name; `low_stock` keeps those at or below that level."""
    query = db.session.query(Product)
    if low_stock is not None:
        query = query.filter(Product.stock <= low_stock)
    return query.order_by(Product.name).all()
