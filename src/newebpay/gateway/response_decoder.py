"""
Decoding of gateway replies.

Trade APIs answer with `Name=Value&Name=Value` strings, ezPay invoice
APIs with JSON. The credit card cancel/close replies must have their raw
bytes read as UTF-8 before percent-decoding; the trade query reply is
decoded byte-for-byte. Each operation keeps the path it has always had.
"""

import json
from typing import Any, Dict, Optional, Union
from urllib.parse import unquote

from ..shared.constants import RespondType
from ..shared.errors import MalformedResponse
from ..shared.operations import OperationSpec
from .models import GatewayResponse


Body = Union[bytes, str]


def decode_query_string(body: Body, reinterpret_utf8: bool = False) -> Dict[str, str]:
    """
    Split an `&`-delimited reply into an ordered mapping.

    With `reinterpret_utf8` the raw bytes are read as UTF-8 and the
    percent-escapes decoded as UTF-8. Without it every byte maps to one
    code point (latin-1).

    Raises:
        MalformedResponse if a pair has no `=` or decoding fails
    """
    encoding = "utf-8" if reinterpret_utf8 else "latin-1"
    try:
        text = body.decode(encoding) if isinstance(body, bytes) else body
    except UnicodeDecodeError as e:
        raise MalformedResponse(f"Reply is not valid {encoding}: {e}", raw_body=body)

    result: Dict[str, str] = {}
    # trailing empty segments carry no pair
    text = text.rstrip("&")
    if not text:
        return result

    for segment in text.split("&"):
        if "=" not in segment:
            raise MalformedResponse(f"Pair without '=': {segment!r}", raw_body=body)
        name, _, value = segment.partition("=")
        try:
            result[unquote(name, encoding=encoding, errors="strict")] = \
                unquote(value, encoding=encoding, errors="strict")
        except UnicodeDecodeError as e:
            raise MalformedResponse(f"Could not decode {segment!r}: {e}", raw_body=body)

    return result


def decode_json(body: Body) -> Any:
    """
    Parse a JSON reply.

    Raises:
        MalformedResponse if the body is not JSON
    """
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponse(f"Reply is not JSON: {e}", raw_body=body)


class ResponseDecoder:
    """Picks the wire format and decode path for an operation."""

    def decode(
        self,
        spec: OperationSpec,
        response: GatewayResponse,
        respond_type: Optional[RespondType] = None,
    ) -> Any:
        """
        Decode `response` for `spec`.

        `respond_type` is the format the request asked for; it defaults
        to the operation's own.
        """
        respond_type = respond_type or spec.respond_type
        try:
            if respond_type is RespondType.JSON:
                return decode_json(response.body)
            return decode_query_string(response.body, reinterpret_utf8=spec.reinterpret_utf8)
        except MalformedResponse as e:
            e.status_code = response.status_code
            raise
