"""Request/response helpers shared by the blueprints."""
from flask import jsonify, request

from app.exceptions import InvalidInputError


def json_body() -> dict:
    """Parsed JSON object body; an absent body is treated as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def success(data=None, status: int = 200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def success_list(items: list, status: int = 200):
    return success(items, status, count=len(items))
