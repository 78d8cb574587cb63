# Overview: Maps processor results onto JSON responses.

from flask import jsonify

from ..services.errors import InsufficientStock, ServiceResult, StorageError, ValidationError

ERROR_STATUS = {
    ValidationError: 400,
    InsufficientStock: 409,
    StorageError: 503,
}


def failure_response(error):
    status = ERROR_STATUS.get(type(error), 400)
    return jsonify(error.to_dict()), status


def result_response(result: ServiceResult, key: str, status: int = 201):
    """201 with `{key: value.to_dict()}` on success, mapped error status otherwise."""
    if not result.ok:
        return failure_response(result.error)
    return jsonify({key: result.value.to_dict()}), status


def parse_int(value, field: str):
    """Coerce form/JSON ids; raises ValidationError for anything non-integral."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ValidationError(f"{field} must be an integer")
