"""
Exceptions raised by the NewebPay client.

Everything the client raises on its own derives from SpgatewayError.
Network failures are not wrapped: urllib's exceptions reach the caller
unchanged.
"""

from typing import Iterable, Optional, Union


class SpgatewayError(Exception):
    """Base exception for gateway client errors."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =============================================================================
# Configuration
# =============================================================================

class ConfigurationError(SpgatewayError):
    """Client configuration is invalid."""
    pass


class InvalidMode(ConfigurationError):
    """Mode is neither test nor production."""
    pass


class MissingOption(ConfigurationError):
    """A required configuration option is unset."""
    def __init__(self, option_name: str):
        super().__init__(f'option "{option_name}" is required.')
        self.option_name = option_name


# =============================================================================
# Request construction
# =============================================================================

class MissingParameter(SpgatewayError):
    """
    A required request parameter is absent.

    `names` holds the missing parameter, or both candidates when one of
    two alternative identifiers is required.
    """
    def __init__(self, names: Union[str, Iterable[str]]):
        if isinstance(names, str):
            names = (names,)
        self.names = tuple(names)
        if len(self.names) == 1:
            message = f'param "{self.names[0]}" is required.'
        else:
            message = (
                "One of the following param is required: "
                + ", ".join(self.names)
            )
        super().__init__(message)

    @property
    def name(self) -> str:
        return self.names[0]


class MissingField(MissingParameter):
    """A field needed for a CheckValue is absent."""
    pass


class UnsupportedOperation(SpgatewayError):
    """The operation kind has no definition for what was asked."""
    pass


class MissingKeyMaterial(SpgatewayError):
    """The secret pair for an endpoint family is not configured."""
    pass


# =============================================================================
# Responses and callbacks
# =============================================================================

class MalformedResponse(SpgatewayError):
    """The gateway reply could not be decoded."""
    def __init__(self, message: str, raw_body: Union[bytes, str, None] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.raw_body = raw_body
        self.status_code = status_code


class CheckCodeMismatch(SpgatewayError):
    """A callback's CheckCode does not match the recomputed value."""
    pass
