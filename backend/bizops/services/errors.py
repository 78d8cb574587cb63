# Overview: Typed failures and the result envelope returned by order/payment processors.

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class OrderProcessingError(Exception):
    """Base class for expected business failures raised inside a unit of work."""

    code = "error"
    retryable = False

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code, "details": self.details}


class ValidationError(OrderProcessingError):
    """Caller-correctable input problem (bad reference, empty items, wrong role)."""

    code = "validation_error"


class InsufficientStock(OrderProcessingError):
    """A line asks for more units than the product has on hand."""

    code = "insufficient_stock"

    def __init__(
        self,
        product_id: int,
        product_name: str,
        requested: int,
        available: int,
        details: dict | None = None,
    ):
        message = (
            f"Insufficient stock for {product_name}: "
            f"requested {requested}, available {available}"
        )
        merged = {
            "product_id": product_id,
            "product_name": product_name,
            "requested": requested,
            "available": available,
        }
        merged.update(details or {})
        super().__init__(message, merged)
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available


class StorageError(OrderProcessingError):
    """Transaction could not commit (lock, conflict, duplicate number). Safe to retry."""

    code = "storage_error"
    retryable = True


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a processor call.

    Expected failures come back here instead of being raised, so callers
    branch on `ok` and show `message`.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[OrderProcessingError] = None

    @classmethod
    def success(cls, value: T) -> "ServiceResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: OrderProcessingError) -> "ServiceResult[T]":
        return cls(ok=False, error=error)

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if not self.ok:
            raise self.error
        return self.value
