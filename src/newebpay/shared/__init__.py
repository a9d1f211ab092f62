"""Shared package initialization."""

from .constants import (
    Mode,
    OperationKind,
    AuthMode,
    KeyFamily,
    RespondType,
    IndexType,
    CloseType,
    Config,
)

from .errors import (
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

from .config import GatewayConfig

from .operations import OperationSpec, CheckValueRule, OPERATION_SPECS, get_operation_spec

from .checksum import CheckValueGenerator, canonicalize

from .encryption import PostDataCipher, PostDataCodec, add_padding, strip_padding

__all__ = [
    # Constants
    "Mode",
    "OperationKind",
    "AuthMode",
    "KeyFamily",
    "RespondType",
    "IndexType",
    "CloseType",
    "Config",
    # Errors
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
    # Configuration
    "GatewayConfig",
    "OperationSpec",
    "CheckValueRule",
    "OPERATION_SPECS",
    "get_operation_spec",
    # Checksums and encryption
    "CheckValueGenerator",
    "canonicalize",
    "PostDataCipher",
    "PostDataCodec",
    "add_padding",
    "strip_padding",
]
