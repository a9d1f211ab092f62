"""
Request construction.

Turns caller parameters into the exact POST fields for an operation:

1. Defaults (RespondType, Version, TimeStamp) are merged under the
   caller's parameters; the caller wins.
2. Required fields are checked in the operation's declared order.
3. Checksum-only APIs get MerchantID and a CheckValue added.
   Encrypted APIs get their fields encrypted into MerchantID_/PostData_.

No network or cryptographic work happens before validation passes.
"""

import time
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ..shared.checksum import CheckValueGenerator
from ..shared.config import GatewayConfig
from ..shared.constants import AuthMode, Config
from ..shared.encryption import PostDataCodec
from ..shared.errors import MissingParameter
from ..shared.fields import present_fields
from ..shared.operations import OperationSpec, get_operation_spec
from .models import PreparedRequest


def require_params(params: Mapping[str, Any], names: Iterable[str]):
    """
    Raise MissingParameter for the first name absent from `params`.

    A value of None counts as absent.
    """
    for name in names:
        if params.get(name) is None:
            raise MissingParameter(name)


def require_one_of(params: Mapping[str, Any], names: Iterable[str]):
    """Raise MissingParameter naming all candidates if none is present."""
    names = tuple(names)
    if names and all(params.get(name) is None for name in names):
        raise MissingParameter(names)


class RequestBuilder:
    """
    Builds signed or encrypted request fields.

    Usage:
        builder = RequestBuilder(config)
        prepared = builder.prepare("query_trade_info", {"MerchantOrderNo": "ORDER1", "Amt": 100})
        prepared.url, prepared.fields
    """

    def __init__(self, config: GatewayConfig, clock: Optional[Callable[[], float]] = None):
        self.config = config
        self.clock = clock or time.time
        self.checksums = CheckValueGenerator(config.hash_key, config.hash_iv)
        self.codec = PostDataCodec(config)

    def defaults(self, spec: OperationSpec) -> Dict[str, Any]:
        defaults: Dict[str, Any] = {}
        if spec.respond_type is not None:
            defaults["RespondType"] = spec.respond_type.value
        defaults["Version"] = spec.version
        defaults["TimeStamp"] = int(self.clock())
        return defaults

    def merge(self, spec: OperationSpec, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        merged = self.defaults(spec)
        merged.update(params or {})
        return merged

    def validate(self, spec: OperationSpec, params: Mapping[str, Any]):
        require_params(params, spec.required_fields)
        require_one_of(params, spec.one_of)

    def sign(self, spec: OperationSpec, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Add MerchantID and CheckValue to a copy of `params`."""
        fields = dict(params)
        fields["MerchantID"] = self.config.merchant_id
        fields["CheckValue"] = self.checksums.check_value_for(spec.check_value, fields)
        return fields

    def encrypt(self, spec: OperationSpec, params: Mapping[str, Any]) -> Dict[str, str]:
        """Encrypt `params` into the two fields encrypted APIs accept."""
        return {
            Config.ENCRYPTED_MERCHANT_ID_FIELD: self.config.merchant_id,
            Config.ENCRYPTED_POST_DATA_FIELD: self.codec.encode(spec.kind, present_fields(params)),
        }

    def prepare(self, kind, params: Optional[Mapping[str, Any]] = None) -> PreparedRequest:
        """
        Build the request for `kind`.

        Raises:
            UnsupportedOperation for unknown kinds
            MissingParameter if a required parameter is absent
            MissingField if a CheckValue field is absent
            MissingKeyMaterial if the secret pair is not configured
        """
        spec = get_operation_spec(kind)
        merged = self.merge(spec, params)
        self.validate(spec, merged)

        if spec.auth_mode is AuthMode.CHECKSUM_ONLY:
            fields = self.sign(spec, merged)
        else:
            fields = self.encrypt(spec, merged)

        return PreparedRequest(
            kind=spec.kind,
            url=spec.endpoint(self.config.mode),
            params=merged,
            fields=fields,
        )

    def build(self, kind, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Same as prepare, returning only the wire fields."""
        return self.prepare(kind, params).fields
