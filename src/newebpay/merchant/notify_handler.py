"""
Merchant Notify Handler

Handles the server-to-server notifications NewebPay posts back to the
merchant (NotifyURL) and any reply that carries a CheckCode.

Key principles:
1. ALWAYS verify the CheckCode first
2. Dispatch on the Status the gateway reports
3. Return quickly; the gateway resends notifications it considers failed
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qsl

from ..shared.checksum import CheckValueGenerator
from ..shared.config import GatewayConfig
from ..shared.errors import CheckCodeMismatch

logger = logging.getLogger("newebpay")

ANY_STATUS = "*"


@dataclass
class NotifyEvent:
    """A verified notification."""
    status: str
    params: Dict[str, str]

    @property
    def merchant_order_no(self) -> Optional[str]:
        return self.params.get("MerchantOrderNo")

    @property
    def trade_no(self) -> Optional[str]:
        return self.params.get("TradeNo")

    @property
    def amt(self) -> Optional[str]:
        return self.params.get("Amt")

    @property
    def succeeded(self) -> bool:
        return self.status == "SUCCESS"


class NotifyHandler:
    """
    Handler for incoming gateway notifications.

    Usage:
        handler = NotifyHandler(config)

        @handler.on("SUCCESS")
        def handle_paid(event):
            mark_order_paid(event.merchant_order_no, event.trade_no)

        # In your web framework route:
        def notify_route(request):
            try:
                handler.handle(request.body)
                return Response("OK")
            except CheckCodeMismatch:
                return Response(status=400)
    """

    def __init__(self, config: GatewayConfig):
        self.checksums = CheckValueGenerator(config.hash_key, config.hash_iv)
        self._handlers: Dict[str, List[Callable]] = {}

    def on(self, status: str):
        """Register a handler for a Status value; "*" receives everything."""
        def decorator(func: Callable):
            self._handlers.setdefault(status, []).append(func)
            return func
        return decorator

    def parse(self, payload: Union[bytes, str, Mapping[str, Any]]) -> Dict[str, str]:
        """Accept a form body or an already parsed mapping."""
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        if isinstance(payload, str):
            return dict(parse_qsl(payload, keep_blank_values=True))
        return {str(name): value for name, value in payload.items()}

    def verify(self, params: Mapping[str, Any]) -> bool:
        """
        Raises:
            CheckCodeMismatch if the CheckCode is missing or wrong
        """
        if not self.checksums.verify_check_code(params):
            raise CheckCodeMismatch(
                f"CheckCode mismatch for order {params.get('MerchantOrderNo')!r}"
            )
        return True

    def handle(self, payload: Union[bytes, str, Mapping[str, Any]]) -> NotifyEvent:
        """Verify a notification and run the handlers for its Status."""
        params = self.parse(payload)

        try:
            self.verify(params)
        except CheckCodeMismatch:
            logger.warning('Newebpay: Rejected notification with bad CheckCode', extra={
                'order_no': params.get('MerchantOrderNo'), 'trade_no': params.get('TradeNo')})
            raise

        event = NotifyEvent(status=params.get("Status", ""), params=params)
        handlers = self._handlers.get(event.status, []) + self._handlers.get(ANY_STATUS, [])
        if not handlers:
            logger.info('Newebpay: No handler for notification status',
                        extra={'status': event.status, 'order_no': event.merchant_order_no})
        for handler in handlers:
            handler(event)
        return event
