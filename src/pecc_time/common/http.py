from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import NotFound, ValidationError
from ..storage.mapping import EntityCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")


def read_json() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def decode_body(codec: EntityCodec[T], data: Mapping[str, Any]) -> T:
    try:
        return codec.from_wire(data)
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}")
    except (AttributeError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid data: {e}")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return jsonify({"message": str(e)}), 400

    @app.errorhandler(NotFound)
    def _not_found(e: NotFound):
        return jsonify({"message": str(e)}), 404

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(Exception)
    def _unexpected_error(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return jsonify({"message": f"Internal server error: {e}"}), 500
        return jsonify({"message": "Internal server error"}), 500
