"""HTTP helpers shared by every Gyazo endpoint.

Each helper takes a context message naming the operation, so a failure
reads like "Could not send API get request" rather than a bare traceback.
"""

import json
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import urlsplit

import requests

from .exceptions import (
    ApiError,
    DecodeError,
    TransportError,
    UrlParseError,
)

T = TypeVar("T")

# Substituted when an error response body cannot be read
TEXT_MISSING = "TEXT MISSING"


def send(
    session: requests.Session,
    method: str,
    url: str,
    message: str,
    **kwargs: Any,
) -> requests.Response:
    """Issue one request, wrapping low-level failures in TransportError."""
    try:
        return session.request(method, url, **kwargs)
    except requests.RequestException as e:
        raise TransportError(message) from e


def verify(response: requests.Response, message: str) -> requests.Response:
    """Return the response unchanged if it succeeded, else raise ApiError.

    Args:
        response: Response to check
        message: Context for the error, e.g. "API get request to `...` failed"

    Raises:
        ApiError: Non-2xx status, with the mapped ApiStatus and raw body text.
    """
    if 200 <= response.status_code < 300:
        return response

    try:
        text = response.text
    except (requests.RequestException, UnicodeDecodeError):
        text = TEXT_MISSING

    raise ApiError(message, response.status_code, text)


def read_text(response: requests.Response, message: str) -> str:
    """Read the full response body as text."""
    try:
        return response.text
    except (requests.RequestException, UnicodeDecodeError) as e:
        raise TransportError(message) from e


def extract_json(
    response: requests.Response,
    message: str,
    decode: Callable[[Any], T],
    type_name: str,
) -> T:
    """Decode a JSON response body into a typed value.

    The body is read as text before parsing so that the payload can be
    reported verbatim when the API changes shape.

    Args:
        response: Verified response
        message: Context for the error
        decode: Converts the parsed JSON into the target type
        type_name: Name of the target type, for diagnostics only

    Raises:
        TransportError: Body could not be read.
        DecodeError: Body is not JSON or does not match the target shape.
    """
    text = read_text(response, "response contained invalid text")
    try:
        return decode(json.loads(text))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise DecodeError(message, text, type_name) from e


def parse_url(text: str, message: str) -> str:
    """Validate that text is an absolute URL and return it stripped."""
    url = text.strip()
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise UrlParseError(message, text) from e
    if not parts.scheme or not parts.netloc:
        raise UrlParseError(message, text)
    return url


def extract_url(response: requests.Response, message: str, text_message: str) -> str:
    """Read a plain-text response body holding a single URL."""
    return parse_url(read_text(response, text_message), message)


def total_count(response: requests.Response) -> int | None:
    """Parse the ``x-total-count`` header, or None if absent or malformed."""
    value = response.headers.get("x-total-count")
    if value is None:
        return None
    value = value.strip()
    # Non-negative decimal only; int() would also take "-5", "+5" and "1_000"
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)
