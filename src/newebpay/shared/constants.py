"""
Shared constants and configuration for the NewebPay client.

This module defines the enumerations and protocol constants used by
the checksum engine, the PostData cipher and the gateway client.
"""

from enum import Enum


# =============================================================================
# OPERATING MODE
# =============================================================================

class Mode(str, Enum):
    """Which gateway environment requests are sent to."""
    TEST = "test"
    PRODUCTION = "production"


# =============================================================================
# OPERATION KINDS
# =============================================================================

class OperationKind(str, Enum):
    """Gateway APIs this client knows how to talk to."""
    MPG = "mpg"                                              # Multi Payment Gateway form
    QUERY_TRADE_INFO = "query_trade_info"                    # Transaction API
    CREDIT_CARD_DEAUTHORIZE = "credit_card_deauthorize"      # Cancel an authorization
    CREDIT_CARD_COLLECT_REFUND = "credit_card_collect_refund"  # Request/cancel collection or refund
    EZPAY_INVOICE_ISSUE = "ezpay_invoice_issue"              # ezPay e-invoice issuance
    CREDIT_CARD_PERIOD = "credit_card_period"                # Recurring billing setup form


class AuthMode(str, Enum):
    """How a request proves it came from the merchant."""
    CHECKSUM_ONLY = "checksum_only"   # Plaintext fields + CheckValue
    ENCRYPTED = "encrypted"           # MerchantID_ + PostData_ ciphertext


class KeyFamily(str, Enum):
    """Which secret pair encrypts a payload."""
    PRIMARY = "primary"   # NewebPay trade APIs
    INVOICE = "invoice"   # ezPay invoice APIs


class RespondType(str, Enum):
    """Reply formats the gateway can be asked for."""
    STRING = "String"
    JSON = "JSON"


# =============================================================================
# INDEX TYPES (credit card deauthorize / close)
# =============================================================================

class IndexType(int, Enum):
    """Which identifier a credit card cancel/close request refers to."""
    MERCHANT_ORDER_NO = 1
    TRADE_NO = 2


class CloseType(int, Enum):
    """Credit card close request flavour."""
    COLLECT = 1   # 請款
    REFUND = 2    # 退款


# =============================================================================
# ENDPOINTS
# =============================================================================

MPG_GATEWAY_ENDPOINTS = {
    Mode.TEST: "https://ccore.newebpay.com/MPG/mpg_gateway",
    Mode.PRODUCTION: "https://core.newebpay.com/MPG/mpg_gateway",
}

TRANSACTION_API_ENDPOINTS = {
    Mode.TEST: "https://ccore.newebpay.com/API/QueryTradeInfo",
    Mode.PRODUCTION: "https://core.newebpay.com/API/QueryTradeInfo",
}

CREDITCARD_DEAUTHORIZE_API_ENDPOINTS = {
    Mode.TEST: "https://ccore.newebpay.com/API/CreditCard/Cancel",
    Mode.PRODUCTION: "https://core.newebpay.com/API/CreditCard/Cancel",
}

CREDITCARD_COLLECT_REFUND_API_ENDPOINTS = {
    Mode.TEST: "https://ccore.newebpay.com/API/CreditCard/Close",
    Mode.PRODUCTION: "https://core.newebpay.com/API/CreditCard/Close",
}

EZPAY_INVOICE_API_ENDPOINTS = {
    Mode.TEST: "https://cinv.ezpay.com.tw/Api/invoice_issue",
    Mode.PRODUCTION: "https://inv.ezpay.com.tw/Api/invoice_issue",
}

CREDITCARD_PERIOD_ENDPOINTS = {
    Mode.TEST: "https://ccore.newebpay.com/MPG/period",
    Mode.PRODUCTION: "https://core.newebpay.com/MPG/period",
}


# =============================================================================
# CONFIGURATION
# =============================================================================

class Config:
    """Protocol constants."""

    # Secrets
    HASH_KEY_LENGTH = 32  # AES-256
    HASH_IV_LENGTH = 16   # AES block

    # PostData_ padding stride. The gateway pads to 32 bytes even though
    # AES blocks are 16 bytes; ciphertexts only match with this value.
    PAD_BLOCK_SIZE = 32

    # Fields the gateway signs in CheckCode on callbacks and replies
    CHECK_CODE_FIELDS = ("Amt", "MerchantID", "MerchantOrderNo", "TradeNo")

    # Field names for encrypted requests
    ENCRYPTED_MERCHANT_ID_FIELD = "MerchantID_"
    ENCRYPTED_POST_DATA_FIELD = "PostData_"

    # Transport
    HTTP_TIMEOUT_SECONDS = 30

    # Environment variable prefix used by GatewayConfig.from_env
    ENV_PREFIX = "NEWEBPAY_"
