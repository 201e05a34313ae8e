"""Helpers for interpreting backend failures and user-entered numbers."""

import math

import httpx

HTTP_UNAUTHORIZED = 401
HTTP_NOT_FOUND = 404


def status_code_from_exception(exc: Exception) -> int | None:
    """Extract the HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def is_unauthorized(exc: Exception) -> bool:
    return status_code_from_exception(exc) == HTTP_UNAUTHORIZED


def is_not_found(exc: Exception) -> bool:
    return status_code_from_exception(exc) == HTTP_NOT_FOUND


def error_message(exc: httpx.HTTPError) -> str:
    """Return the raw server message for a failed call.

    Uses the response body text, then the reason phrase, then the exception
    text.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        text = response.text.strip()
        if text:
            return text
        if response.reason_phrase:
            return response.reason_phrase
    return str(exc) or exc.__class__.__name__


def status_message(exc: httpx.HTTPError) -> str:
    """Return the ``statusMessage`` of a JSON error body, else the raw message."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            data = exc.response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("statusMessage"):
            return str(data["statusMessage"])
    return error_message(exc)


def parse_number(raw_text: str) -> float:
    """Parse user input, coercing anything non-numeric to 0.0."""
    try:
        value = float(raw_text.strip().replace(",", "."))
    except ValueError:
        return 0.0
    if math.isnan(value):
        return 0.0
    return value


def is_positive_number(value: float) -> bool:
    return math.isfinite(value) and value > 0
