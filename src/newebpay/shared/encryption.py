"""
PostData_ encryption for NewebPay / ezPay APIs.

Encrypted APIs receive the whole parameter string as AES-256-CBC
ciphertext in hex. The cipher runs without its own padding; the
plaintext is padded by hand to a 32-byte stride:

    pad = 32 - (len(data) % 32)      # 1..32, never 0
    data + bytes([pad]) * pad

A 16-byte PKCS#7 pad produces a ciphertext the gateway rejects.
"""

import binascii
from typing import Any, Dict, Mapping, Union
from urllib.parse import parse_qsl

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .config import GatewayConfig
from .constants import Config
from .fields import form_encode
from .operations import get_operation_spec


def add_padding(data: bytes, size: int = Config.PAD_BLOCK_SIZE) -> bytes:
    """
    Pad `data` to a multiple of `size`.

    A full block is appended when `data` is already aligned.
    """
    pad = size - (len(data) % size)
    return data + bytes([pad]) * pad


def strip_padding(data: bytes, size: int = Config.PAD_BLOCK_SIZE) -> bytes:
    """
    Remove padding added by add_padding.

    Raises:
        ValueError if the trailing bytes are not a valid pad
    """
    if not data or len(data) % size:
        raise ValueError(f"Padded data length {len(data)} is not a multiple of {size}")
    pad = data[-1]
    if not 1 <= pad <= size or data[-pad:] != bytes([pad]) * pad:
        raise ValueError("Invalid padding")
    return data[:-pad]


class PostDataCipher:
    """
    AES-256-CBC with a fixed key/IV pair and manual 32-byte padding.

    The same pair encrypts and decrypts, so decrypt(encrypt(x)) == x.
    """

    ALGORITHM = "AES-256-CBC"

    def __init__(self, key: bytes, iv: bytes):
        if len(key) != Config.HASH_KEY_LENGTH:
            raise ValueError(f"Key must be {Config.HASH_KEY_LENGTH} bytes")
        if len(iv) != Config.HASH_IV_LENGTH:
            raise ValueError(f"IV must be {Config.HASH_IV_LENGTH} bytes")
        self.key = key
        self.iv = iv

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self.key), modes.CBC(self.iv))

    def encrypt_bytes(self, plaintext: bytes) -> bytes:
        """Pad and encrypt, returning raw ciphertext."""
        encryptor = self._cipher().encryptor()
        return encryptor.update(add_padding(plaintext)) + encryptor.finalize()

    def decrypt_bytes(self, ciphertext: bytes) -> bytes:
        """
        Decrypt raw ciphertext, returning the still-padded plaintext.

        Raises:
            ValueError if the ciphertext is not block aligned
        """
        if not ciphertext or len(ciphertext) % 16:
            raise ValueError("Ciphertext length is not a multiple of the AES block size")
        decryptor = self._cipher().decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()

    def encrypt(self, plaintext: Union[str, bytes]) -> str:
        """Encrypt a parameter string, returning lowercase hex."""
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")
        return binascii.hexlify(self.encrypt_bytes(plaintext)).decode("ascii")

    def decrypt(self, hex_ciphertext: str) -> str:
        """
        Inverse of encrypt.

        Raises:
            ValueError if the input is not hex, not block aligned or
            carries an invalid pad
        """
        try:
            ciphertext = binascii.unhexlify(hex_ciphertext.strip())
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Decryption failed: {e}")
        return strip_padding(self.decrypt_bytes(ciphertext)).decode("utf-8")


class PostDataCodec:
    """
    Encrypts request fields for an operation with the right secret pair.

    Trade, deauthorize and close APIs use the primary pair; ezPay invoice
    APIs use the invoice pair.
    """

    def __init__(self, config: GatewayConfig):
        self.config = config

    def cipher_for(self, kind) -> PostDataCipher:
        """
        Raises:
            UnsupportedOperation for unknown kinds
            MissingKeyMaterial if the pair for the kind is not configured
        """
        spec = get_operation_spec(kind)
        key, iv = self.config.key_pair(spec.key_family)
        return PostDataCipher(key, iv)

    def encode(self, kind, fields: Union[Mapping[str, Any], str]) -> str:
        """
        Encrypt `fields` for `kind`.

        A mapping is URL-encoded in insertion order first; a string is
        taken as an already encoded parameter string.
        """
        data = fields if isinstance(fields, str) else form_encode(fields)
        return self.cipher_for(kind).encrypt(data)

    def decode(self, kind, hex_ciphertext: str) -> str:
        """Decrypt a PostData_ / TradeInfo hex string for `kind`."""
        return self.cipher_for(kind).decrypt(hex_ciphertext)

    def decode_fields(self, kind, hex_ciphertext: str) -> Dict[str, str]:
        """Decrypt and split back into an ordered field mapping."""
        return dict(parse_qsl(self.decode(kind, hex_ciphertext), keep_blank_values=True))
