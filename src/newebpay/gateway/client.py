"""
NewebPay / ezPay API client.

Example usage:
    client = SpgatewayClient(
        mode="test",
        merchant_id="MS12345",
        hash_key="12345678901234567890123456789012",
        hash_iv="1234567890123456",
    )

    # Ask the gateway about an order
    info = client.query_trade_info(MerchantOrderNo="ORDER1", Amt=100)
    info["Status"]

    # Cancel an authorization by order number
    client.credit_card_deauthorize_by_merchant_order_no(MerchantOrderNo="ORDER1", Amt=100)

Every call is a single synchronous exchange. The client holds nothing
but its immutable config, so one instance can serve many threads.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from ..shared.checksum import CheckValueGenerator
from ..shared.config import GatewayConfig
from ..shared.constants import IndexType, OperationKind
from ..shared.encryption import PostDataCodec
from ..shared.errors import MalformedResponse, UnsupportedOperation
from ..shared.operations import get_operation_spec
from .request_builder import RequestBuilder, require_params
from .response_decoder import ResponseDecoder
from .transport import UrllibTransport

logger = logging.getLogger("newebpay")


def _params(params: Optional[Mapping[str, Any]], kwargs: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(params or {})
    merged.update(kwargs)
    return merged


class SpgatewayClient:
    """
    Client for NewebPay trade APIs and ezPay invoice issuance.

    Pass either a ready GatewayConfig or the options to build one.
    `transport` must provide `post(url, fields)`; it defaults to urllib.
    """

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        transport=None,
        clock: Optional[Callable[[], float]] = None,
        **options,
    ):
        self.config = config if config is not None else GatewayConfig(**options)
        self.transport = transport or UrllibTransport()
        self.builder = RequestBuilder(self.config, clock=clock)
        self.decoder = ResponseDecoder()
        self.checksums = CheckValueGenerator(self.config.hash_key, self.config.hash_iv)
        self.codec = PostDataCodec(self.config)

    @property
    def options(self) -> GatewayConfig:
        return self.config

    # -------------------------------------------------------------------------
    # Checksums and PostData
    # -------------------------------------------------------------------------

    def make_check_value(self, kind, params: Optional[Mapping[str, Any]] = None, **kwargs) -> str:
        """CheckValue for `kind` over the given fields."""
        return self.checksums.make_check_value(kind, _params(params, kwargs))

    def verify_check_code(self, params: Optional[Mapping[str, Any]] = None, **kwargs) -> bool:
        """Check the CheckCode of a callback or reply."""
        return self.checksums.verify_check_code(_params(params, kwargs))

    def encode_post_data(self, kind, data) -> str:
        """Encrypt a field mapping or encoded parameter string for `kind`."""
        return self.codec.encode(kind, data)

    def decode_post_data(self, kind, hex_data: str) -> str:
        """Decrypt PostData_ (or a callback TradeInfo) back to its parameter string."""
        return self.codec.decode(kind, hex_data)

    def parse_post_data(self, kind, hex_data: str) -> Dict[str, str]:
        """Decrypt and split PostData_ into fields."""
        return self.codec.decode_fields(kind, hex_data)

    # -------------------------------------------------------------------------
    # Form parameters (posted by the buyer's browser)
    # -------------------------------------------------------------------------

    def generate_mpg_params(self, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Dict[str, Any]:
        """Signed fields for an MPG checkout form."""
        return self.builder.build(OperationKind.MPG, _params(params, kwargs))

    def generate_credit_card_period_params(
        self, params: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> Dict[str, Any]:
        """Signed fields for a recurring credit card billing form."""
        return self.builder.build(OperationKind.CREDIT_CARD_PERIOD, _params(params, kwargs))

    def form_action(self, kind) -> str:
        """URL a browser form for `kind` posts to."""
        return get_operation_spec(kind).endpoint(self.config.mode)

    # -------------------------------------------------------------------------
    # API calls
    # -------------------------------------------------------------------------

    def query_trade_info(self, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Dict[str, str]:
        """
        Query a transaction. Requires MerchantOrderNo and Amt.

        Values are decoded byte for byte, so multi-byte text arrives as
        latin-1 characters; use `value.encode("latin-1").decode("utf-8")`
        to read it as UTF-8.
        """
        return self.request(OperationKind.QUERY_TRADE_INFO, _params(params, kwargs))

    def credit_card_deauthorize(self, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Dict[str, str]:
        """
        Cancel a credit card authorization.

        Requires Amt, IndexType and one of MerchantOrderNo/TradeNo.
        """
        return self.request(OperationKind.CREDIT_CARD_DEAUTHORIZE, _params(params, kwargs))

    def credit_card_deauthorize_by_merchant_order_no(
        self, params: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> Dict[str, str]:
        params = _params(params, kwargs)
        require_params(params, ["Amt", "MerchantOrderNo"])
        return self.credit_card_deauthorize(_params({"IndexType": IndexType.MERCHANT_ORDER_NO.value}, params))

    def credit_card_deauthorize_by_trade_no(
        self, params: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> Dict[str, str]:
        params = _params(params, kwargs)
        require_params(params, ["Amt", "TradeNo"])
        return self.credit_card_deauthorize(_params({"IndexType": IndexType.TRADE_NO.value}, params))

    def credit_card_collect_refund(self, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Dict[str, str]:
        """
        Request or cancel collection, or a refund, for a credit card trade.

        Requires Amt, IndexType, CloseType and one of MerchantOrderNo/TradeNo.
        """
        return self.request(OperationKind.CREDIT_CARD_COLLECT_REFUND, _params(params, kwargs))

    def credit_card_collect_refund_by_merchant_order_no(
        self, params: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> Dict[str, str]:
        params = _params(params, kwargs)
        require_params(params, ["Amt", "MerchantOrderNo", "CloseType"])
        return self.credit_card_collect_refund(_params({"IndexType": IndexType.MERCHANT_ORDER_NO.value}, params))

    def credit_card_collect_refund_by_trade_no(
        self, params: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> Dict[str, str]:
        params = _params(params, kwargs)
        require_params(params, ["Amt", "TradeNo", "CloseType"])
        return self.credit_card_collect_refund(_params({"IndexType": IndexType.TRADE_NO.value}, params))

    def generate_invoice(self, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        """Issue an ezPay e-invoice. Returns the parsed JSON reply."""
        return self.request(OperationKind.EZPAY_INVOICE_ISSUE, _params(params, kwargs))

    def request(self, kind, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Build, send and decode one API call.

        Raises:
            UnsupportedOperation if `kind` is a browser-posted form
            MalformedResponse if the reply cannot be decoded
        """
        spec = get_operation_spec(kind)
        if not spec.sends_request:
            raise UnsupportedOperation(
                f"{spec.kind.value} is posted by the browser; use its generate_*_params method."
            )

        prepared = self.builder.prepare(spec.kind, params)
        logger.debug('Newebpay: Sending API request', extra={
            'kind': spec.kind.value, 'url': prepared.url, 'params': sorted(prepared.params)})

        response = self.transport.post(prepared.url, prepared.fields)

        try:
            result = self.decoder.decode(spec, response, prepared.respond_type)
        except MalformedResponse as e:
            logger.error('Newebpay: Could not decode gateway reply', extra={
                'kind': spec.kind.value, 'url': prepared.url, 'status': response.status_code,
                'body_length': len(response.body or b''), 'reason': e.message})
            raise

        logger.debug('Newebpay: API request finished', extra={
            'kind': spec.kind.value, 'status': response.status_code})
        return result
