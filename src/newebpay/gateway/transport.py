"""
HTTP transport for gateway requests.

The client only needs something with `post(url, fields)` returning a
GatewayResponse. UrllibTransport is the default; tests inject fakes.
"""

import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Mapping

from ..shared.constants import Config
from ..shared.fields import present_fields, stringify_value
from .models import GatewayResponse


class UrllibTransport:
    """
    Posts application/x-www-form-urlencoded bodies with urllib.

    Connection errors and timeouts propagate as urllib raises them.
    HTTP error statuses are returned, since the gateway still puts its
    status fields in the body.
    """

    def __init__(self, timeout: int = Config.HTTP_TIMEOUT_SECONDS):
        self.timeout = timeout

    def encode_form(self, fields: Mapping[str, Any]) -> bytes:
        pairs = [
            (name, stringify_value(value))
            for name, value in present_fields(fields).items()
        ]
        return urllib.parse.urlencode(pairs).encode("ascii")

    def post(self, url: str, fields: Mapping[str, Any]) -> GatewayResponse:
        request = urllib.request.Request(
            url,
            data=self.encode_form(fields),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                return GatewayResponse(
                    status_code=response.status,
                    body=response.read(),
                    url=url,
                    headers=dict(response.headers.items()),
                )
        except urllib.error.HTTPError as e:
            return GatewayResponse(
                status_code=e.code,
                body=e.read(),
                url=url,
                headers=dict(e.headers.items()) if e.headers else {},
            )
