"""
Merchant configuration.

A GatewayConfig is built once, validated in __post_init__ and then
shared read-only by every request.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple, Union

from .constants import Config, KeyFamily, Mode
from .errors import ConfigurationError, InvalidMode, MissingKeyMaterial, MissingOption


Secret = Union[bytes, str]


def _to_bytes(value: Optional[Secret]) -> Optional[bytes]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


@dataclass(frozen=True)
class GatewayConfig:
    """
    Mode and shared secrets for one merchant.

    Secrets may be given as str or bytes and are stored as bytes. The
    invoice pair is only needed for ezPay e-invoice issuance.

    Usage:
        config = GatewayConfig(
            mode="test",
            merchant_id="MS12345",
            hash_key="12345678901234567890123456789012",
            hash_iv="1234567890123456",
        )
    """
    merchant_id: str
    hash_key: Secret = field(repr=False)
    hash_iv: Secret = field(repr=False)
    mode: Union[Mode, str] = Mode.PRODUCTION
    invoice_hash_key: Optional[Secret] = field(default=None, repr=False)
    invoice_hash_iv: Optional[Secret] = field(default=None, repr=False)

    def __post_init__(self):
        try:
            mode = Mode(self.mode)
        except ValueError:
            raise InvalidMode("option :mode is either :test or :production")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "mode", mode)

        for option_name in ("merchant_id", "hash_key", "hash_iv"):
            if not getattr(self, option_name):
                raise MissingOption(option_name)

        for option_name in ("hash_key", "hash_iv", "invoice_hash_key", "invoice_hash_iv"):
            object.__setattr__(self, option_name, _to_bytes(getattr(self, option_name)))

        self._check_pair("hash_key", "hash_iv")

        has_key = bool(self.invoice_hash_key)
        has_iv = bool(self.invoice_hash_iv)
        if has_key != has_iv:
            raise ConfigurationError(
                "invoice_hash_key and invoice_hash_iv must be set together."
            )
        if has_key:
            self._check_pair("invoice_hash_key", "invoice_hash_iv")

    def _check_pair(self, key_name: str, iv_name: str):
        key = getattr(self, key_name)
        iv = getattr(self, iv_name)
        if len(key) != Config.HASH_KEY_LENGTH:
            raise ConfigurationError(
                f'option "{key_name}" must be {Config.HASH_KEY_LENGTH} bytes, got {len(key)}.'
            )
        if len(iv) != Config.HASH_IV_LENGTH:
            raise ConfigurationError(
                f'option "{iv_name}" must be {Config.HASH_IV_LENGTH} bytes, got {len(iv)}.'
            )
        for name, secret in ((key_name, key), (iv_name, iv)):
            try:
                secret.decode("utf-8")
            except UnicodeDecodeError:
                raise ConfigurationError(f'option "{name}" must be UTF-8 text.')

    @property
    def is_test(self) -> bool:
        return self.mode is Mode.TEST

    @property
    def has_invoice_keys(self) -> bool:
        return self.invoice_hash_key is not None

    def key_pair(self, family: KeyFamily) -> Tuple[bytes, bytes]:
        """
        Return (key, iv) for an endpoint family.

        Raises:
            MissingKeyMaterial if the invoice pair is requested but unset
        """
        if family is KeyFamily.INVOICE:
            if not self.has_invoice_keys:
                raise MissingKeyMaterial(
                    "invoice_hash_key and invoice_hash_iv are required for ezPay invoice APIs."
                )
            return self.invoice_hash_key, self.invoice_hash_iv
        return self.hash_key, self.hash_iv

    @classmethod
    def from_env(cls, prefix: str = Config.ENV_PREFIX,
                 environ: Optional[Mapping[str, str]] = None) -> "GatewayConfig":
        """
        Build a config from environment variables.

        Reads {prefix}MODE, MERCHANT_ID, HASH_KEY, HASH_IV,
        INVOICE_HASH_KEY and INVOICE_HASH_IV. Unset MODE means production.
        """
        env = os.environ if environ is None else environ
        return cls(
            mode=env.get(f"{prefix}MODE") or Mode.PRODUCTION,
            merchant_id=env.get(f"{prefix}MERCHANT_ID"),
            hash_key=env.get(f"{prefix}HASH_KEY"),
            hash_iv=env.get(f"{prefix}HASH_IV"),
            invoice_hash_key=env.get(f"{prefix}INVOICE_HASH_KEY") or None,
            invoice_hash_iv=env.get(f"{prefix}INVOICE_HASH_IV") or None,
        )
