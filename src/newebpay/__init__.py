"""NewebPay (Spgateway) and ezPay API client."""

from .shared import (
    Mode,
    OperationKind,
    IndexType,
    CloseType,
    GatewayConfig,
    SpgatewayError,
    ConfigurationError,
    InvalidMode,
    MissingOption,
    MissingParameter,
    MissingField,
    UnsupportedOperation,
    MissingKeyMaterial,
    MalformedResponse,
    CheckCodeMismatch,
)

from .gateway import SpgatewayClient, GatewayResponse, UrllibTransport

from .merchant import NotifyHandler, NotifyEvent

__version__ = "0.1.0"

__all__ = [
    "Mode",
    "OperationKind",
    "IndexType",
    "CloseType",
    "GatewayConfig",
    "SpgatewayError",
    "ConfigurationError",
    "InvalidMode",
    "MissingOption",
    "MissingParameter",
    "MissingField",
    "UnsupportedOperation",
    "MissingKeyMaterial",
    "MalformedResponse",
    "CheckCodeMismatch",
    "SpgatewayClient",
    "GatewayResponse",
    "UrllibTransport",
    "NotifyHandler",
    "NotifyEvent",
]
