"""
Response Classifier
===================
Tells a JSON API answer apart from an HTML page.

When a session expires the portal does not fail the request; it answers
with the login page instead of JSON.  The ``Content-Type`` header is the
only signal used to detect that.
"""

from __future__ import annotations

import logging

from ..errors import UnexpectedResponseTypeError
from ..utils import get_content_type, get_header

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_json_response(response) -> bool:
    return get_content_type(response.headers) == JSON_CONTENT_TYPE


def validate_response(response) -> None:
    """Raise unless *response* declares ``application/json``.

    The header name is matched case-insensitively and parameters such as
    ``; charset=utf-8`` are ignored.

    Raises:
        UnexpectedResponseTypeError: any other or a missing content type.
    """
    if is_json_response(response):
        return
    actual = get_header(response.headers, "content-type")
    logger.debug(f"[SESSION] Expected JSON, got {actual or 'no content type'}")
    raise UnexpectedResponseTypeError(JSON_CONTENT_TYPE, actual)
