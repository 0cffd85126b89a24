"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from flask import Request
from werkzeug.exceptions import BadRequest


def parse_json_request(req: Request, *, allow_empty: bool = False) -> dict:
    """Return the parsed JSON object body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is malformed.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    return data


def text_field(data: dict, key: str, *, strip: bool = True) -> str:
    """Return ``data[key]`` as a string, ``""`` when missing or null.

    Passwords are read with ``strip=False`` so surrounding whitespace
    stays part of the secret.
    """

    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest(f"Field '{key}' must be a string.")
    return value.strip() if strip else value
