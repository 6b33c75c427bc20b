from flask import request
from spacebook.errors import InvalidInputError


def json_object():
    """Request body as a dict; an empty body counts as {}."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object.")
    return data
