"""
CheckValue / CheckCode generation.

NewebPay never receives the HashKey/HashIV. Instead a SHA-256 digest is
taken over a canonical string of selected fields wrapped by the secrets:

1. Keep only the fields the API signs.
2. Sort them by lower-cased field name.
3. Join as `Name=Value` pairs with `&`.
4. Wrap with the secrets (order depends on the direction and the API).
5. SHA-256 over the UTF-8 bytes, uppercase hex.

Outgoing requests carry a CheckValue; callbacks and replies from the
gateway carry a CheckCode that the merchant recomputes.
"""

import hashlib
import hmac
from typing import Any, Iterable, Mapping, Union

from .constants import Config
from .errors import MissingField, UnsupportedOperation
from .fields import join_pairs
from .operations import HASH_IV_FIRST, CheckValueRule, get_operation_spec


def canonicalize(fields: Mapping[str, Any], names: Iterable[str]) -> str:
    """
    Build the canonical string for the given subset of fields.

    Fields outside `names` are ignored, as are fields that are absent or
    None.

    Example:
        canonicalize({"MerchantOrderNo": "ORDER1", "Amt": 100, "Email": "x"},
                     ["Amt", "MerchantOrderNo"])
        → "Amt=100&MerchantOrderNo=ORDER1"
    """
    wanted = set(names)
    selected = [
        (name, value) for name, value in fields.items()
        if name in wanted and value is not None
    ]
    selected.sort(key=lambda item: item[0].lower())
    return join_pairs(selected)


def _secret_text(secret: Union[bytes, str]) -> str:
    return secret.decode("utf-8") if isinstance(secret, bytes) else secret


class CheckValueGenerator:
    """
    Compute CheckValues for requests and verify CheckCodes on replies.

    Usage:
        generator = CheckValueGenerator(hash_key, hash_iv)
        check_value = generator.make_check_value("query_trade_info", fields)
        generator.verify_check_code(callback_params)
    """

    def __init__(self, hash_key: Union[bytes, str], hash_iv: Union[bytes, str]):
        self.hash_key = _secret_text(hash_key)
        self.hash_iv = _secret_text(hash_iv)

    def digest(self, wrap: str, raw: str) -> str:
        """SHA-256 of the wrapped canonical string, uppercase hex."""
        padded = wrap.format(key=self.hash_key, iv=self.hash_iv, raw=raw)
        return hashlib.sha256(padded.encode("utf-8")).hexdigest().upper()

    def check_value_for(self, rule: CheckValueRule, fields: Mapping[str, Any]) -> str:
        """
        Compute a CheckValue from an explicit rule.

        Raises:
            MissingField naming the first signed field that is absent
        """
        for name in rule.fields:
            if fields.get(name) is None:
                raise MissingField(name)
        return self.digest(rule.wrap, canonicalize(fields, rule.fields))

    def make_check_value(self, kind, fields: Mapping[str, Any]) -> str:
        """
        Compute the CheckValue for an operation kind.

        Raises:
            UnsupportedOperation if the kind carries no CheckValue
            MissingField if a signed field is absent
        """
        spec = get_operation_spec(kind)
        if spec.check_value is None:
            raise UnsupportedOperation(
                f"Unsupported API type: {spec.kind.value} has no CheckValue."
            )
        return self.check_value_for(spec.check_value, fields)

    def make_check_code(self, fields: Mapping[str, Any]) -> str:
        """Compute the CheckCode the gateway attaches to callbacks."""
        raw = canonicalize(fields, Config.CHECK_CODE_FIELDS)
        return self.digest(HASH_IV_FIRST, raw)

    def verify_check_code(self, params: Mapping[str, Any]) -> bool:
        """
        Check the CheckCode carried in `params`.

        `params` is not modified. Returns False when no CheckCode is present.
        """
        fields = {str(name): value for name, value in params.items()}
        received = fields.pop("CheckCode", None)
        if received is None:
            return False

        expected = self.make_check_code(fields)
        # Case-sensitive, constant-time comparison
        return hmac.compare_digest(
            expected.encode("utf-8"), str(received).encode("utf-8")
        )
