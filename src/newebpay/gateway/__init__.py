"""Gateway package initialization."""

from .models import GatewayResponse, PreparedRequest

from .request_builder import RequestBuilder, require_params, require_one_of

from .response_decoder import ResponseDecoder, decode_query_string, decode_json

from .transport import UrllibTransport

from .client import SpgatewayClient

__all__ = [
    # Models
    "GatewayResponse",
    "PreparedRequest",
    # Services
    "RequestBuilder",
    "require_params",
    "require_one_of",
    "ResponseDecoder",
    "decode_query_string",
    "decode_json",
    "UrllibTransport",
    "SpgatewayClient",
]
