"""
Response header helpers.

Response headers are kept as ``name -> list of values`` with the server's
original casing. The helpers here do the case-insensitive lookups the
dispatcher needs for Content-Type and X-Correlation-Id.
"""

from typing import Mapping, Optional

import structlog

from olp_client.http.constants import CONTENT_TYPE, CONTENT_TYPE_JSON, X_CORRELATION_ID


logger = structlog.get_logger(__name__)

_LOWERCASE_CONTENT_TYPE_JSON = CONTENT_TYPE_JSON.lower()


def get_header_values(headers: Optional[Mapping[str, list[str]]], name: str) -> list[str]:
    """
    Return every value of ``name`` (case-insensitive), in server order.

    Values of headers whose names differ only by case are concatenated in
    the order the names appear in the mapping.
    """
    if not headers:
        return []
    wanted = name.lower()
    values: list[str] = []
    for header_name, header_values in headers.items():
        if header_name.lower() == wanted and header_values:
            values.extend(header_values)
    return values


def is_json_content_type(headers: Optional[Mapping[str, list[str]]]) -> bool:
    """
    Decide whether a response body should be parsed as JSON.

    The server has to prove the body is NOT JSON: a missing Content-Type
    header counts as JSON. Otherwise any value whose trimmed, lower-cased
    form starts with ``application/json`` counts.
    """
    content_types = get_header_values(headers, CONTENT_TYPE)
    if not content_types:
        return True
    return any(
        value.strip().lower().startswith(_LOWERCASE_CONTENT_TYPE_JSON)
        for value in content_types
        if value is not None
    )


def get_correlation_id(headers: Optional[Mapping[str, list[str]]]) -> Optional[str]:
    """Return the first X-Correlation-Id value of a response, if any."""
    values = get_header_values(headers, X_CORRELATION_ID)
    if not values:
        return None
    correlation_id = values[0]
    if correlation_id is not None:
        logger.debug("Response correlation id", correlation_id=correlation_id)
    return correlation_id
