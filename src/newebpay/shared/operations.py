"""
Static description of every gateway operation.

One OperationSpec per OperationKind. The client, request builder,
checksum engine and cipher all look an operation up here instead of
switching on the kind.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from .constants import (
    AuthMode,
    KeyFamily,
    Mode,
    OperationKind,
    RespondType,
    MPG_GATEWAY_ENDPOINTS,
    TRANSACTION_API_ENDPOINTS,
    CREDITCARD_DEAUTHORIZE_API_ENDPOINTS,
    CREDITCARD_COLLECT_REFUND_API_ENDPOINTS,
    EZPAY_INVOICE_API_ENDPOINTS,
    CREDITCARD_PERIOD_ENDPOINTS,
)
from .errors import UnsupportedOperation


# Wrap templates around the canonical string. The key/IV order and the
# field labels are fixed by the gateway and differ per API.
HASH_KEY_FIRST = "HashKey={key}&{raw}&HashIV={iv}"
IV_FIRST = "IV={iv}&{raw}&Key={key}"
HASH_IV_FIRST = "HashIV={iv}&{raw}&HashKey={key}"


@dataclass(frozen=True)
class CheckValueRule:
    """Which fields a CheckValue covers and how the secrets wrap them."""
    fields: Tuple[str, ...]
    wrap: str


@dataclass(frozen=True)
class OperationSpec:
    """
    Everything that varies between gateway operations.

    Never mutated at runtime.
    """
    kind: OperationKind
    required_fields: Tuple[str, ...]
    auth_mode: AuthMode
    version: str
    endpoints: Mapping[Mode, str]
    respond_type: Optional[RespondType] = RespondType.STRING
    check_value: Optional[CheckValueRule] = None
    key_family: KeyFamily = KeyFamily.PRIMARY
    one_of: Tuple[str, ...] = ()        # at least one must be present
    reinterpret_utf8: bool = False      # reply needs the UTF-8 reinterpretation
    sends_request: bool = True          # False for browser-posted forms

    def endpoint(self, mode: Mode) -> str:
        return self.endpoints[mode]

    @property
    def checksum_fields(self) -> Tuple[str, ...]:
        return self.check_value.fields if self.check_value else ()


OPERATION_SPECS: Dict[OperationKind, OperationSpec] = {
    OperationKind.MPG: OperationSpec(
        kind=OperationKind.MPG,
        required_fields=("MerchantOrderNo", "Amt", "ItemDesc", "Email", "LoginType"),
        auth_mode=AuthMode.CHECKSUM_ONLY,
        version="1.2",
        endpoints=MPG_GATEWAY_ENDPOINTS,
        check_value=CheckValueRule(
            fields=("Amt", "MerchantID", "MerchantOrderNo", "TimeStamp", "Version"),
            wrap=HASH_KEY_FIRST,
        ),
        sends_request=False,
    ),
    OperationKind.QUERY_TRADE_INFO: OperationSpec(
        kind=OperationKind.QUERY_TRADE_INFO,
        required_fields=("MerchantOrderNo", "Amt"),
        auth_mode=AuthMode.CHECKSUM_ONLY,
        version="1.1",
        endpoints=TRANSACTION_API_ENDPOINTS,
        check_value=CheckValueRule(
            fields=("Amt", "MerchantID", "MerchantOrderNo"),
            wrap=IV_FIRST,
        ),
    ),
    OperationKind.CREDIT_CARD_DEAUTHORIZE: OperationSpec(
        kind=OperationKind.CREDIT_CARD_DEAUTHORIZE,
        required_fields=("Amt", "IndexType"),
        auth_mode=AuthMode.ENCRYPTED,
        version="1.0",
        endpoints=CREDITCARD_DEAUTHORIZE_API_ENDPOINTS,
        one_of=("MerchantOrderNo", "TradeNo"),
        reinterpret_utf8=True,
    ),
    OperationKind.CREDIT_CARD_COLLECT_REFUND: OperationSpec(
        kind=OperationKind.CREDIT_CARD_COLLECT_REFUND,
        required_fields=("Amt", "IndexType", "CloseType"),
        auth_mode=AuthMode.ENCRYPTED,
        version="1.0",
        endpoints=CREDITCARD_COLLECT_REFUND_API_ENDPOINTS,
        one_of=("MerchantOrderNo", "TradeNo"),
        reinterpret_utf8=True,
    ),
    OperationKind.EZPAY_INVOICE_ISSUE: OperationSpec(
        kind=OperationKind.EZPAY_INVOICE_ISSUE,
        required_fields=(
            "MerchantOrderNo", "Status", "Category", "BuyerName", "BuyerEmail",
            "PrintFlag", "TaxType", "TaxRate", "Amt", "TaxAmt", "TotalAmt",
            "ItemName", "ItemCount", "ItemUnit", "ItemPrice", "ItemAmt",
        ),
        auth_mode=AuthMode.ENCRYPTED,
        version="1.5",
        endpoints=EZPAY_INVOICE_API_ENDPOINTS,
        respond_type=RespondType.JSON,
        key_family=KeyFamily.INVOICE,
    ),
    OperationKind.CREDIT_CARD_PERIOD: OperationSpec(
        kind=OperationKind.CREDIT_CARD_PERIOD,
        required_fields=(
            "MerchantOrderNo", "ProdDesc", "PeriodAmt", "PeriodAmtMode",
            "PeriodType", "PeriodPoint", "PeriodStartType", "PeriodTimes",
        ),
        auth_mode=AuthMode.CHECKSUM_ONLY,
        version="1.0",
        endpoints=CREDITCARD_PERIOD_ENDPOINTS,
        check_value=CheckValueRule(
            fields=("MerchantID", "MerchantOrderNo", "PeriodAmt", "PeriodType", "TimeStamp"),
            wrap=HASH_KEY_FIRST,
        ),
        sends_request=False,
    ),
}


def get_operation_spec(kind) -> OperationSpec:
    """
    Look up the spec for an operation kind.

    Accepts an OperationKind or its string value.

    Raises:
        UnsupportedOperation if the kind is unknown
    """
    try:
        return OPERATION_SPECS[OperationKind(kind)]
    except (ValueError, KeyError):
        raise UnsupportedOperation(f"Unsupported API type: {kind!r}.")
