#!/usr/bin/env python3
"""
NewebPay Client Demo Runner

Walks through every operation against a canned transport, so no
merchant account or network access is needed.

Usage:
    python run_demo.py            # Run all demos
    python run_demo.py checksum   # CheckValue / CheckCode only
    python run_demo.py encrypt    # PostData_ encryption only
    python run_demo.py api        # API calls only
"""

import json
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from newebpay import GatewayConfig, GatewayResponse, SpgatewayClient  # noqa: E402


DEMO_CONFIG = GatewayConfig(
    mode="test",
    merchant_id="MS12345",
    hash_key="12345678901234567890123456789012",
    hash_iv="1234567890123456",
    invoice_hash_key="abcdefghijklmnopqrstuvwxyzABCDEF",
    invoice_hash_iv="ABCDEFGHIJKLMNOP",
)

CANNED_REPLIES = {
    "QueryTradeInfo": b"Status=SUCCESS&MerchantOrderNo=ORDER1&Amt=100&TradeStatus=1",
    "CreditCard/Cancel": "Status=SUCCESS&Message=取消授權成功".encode("utf-8"),
    "CreditCard/Close": "Status=SUCCESS&Message=退款成功".encode("utf-8"),
    "invoice_issue": json.dumps({"Status": "SUCCESS", "Message": "開立發票成功"}).encode("utf-8"),
}


class CannedTransport:
    """Answers every post with a canned reply for its endpoint."""

    def post(self, url, fields):
        print(f"   POST {url}")
        for name, value in fields.items():
            shown = f"{str(value)[:40]}..." if len(str(value)) > 40 else value
            print(f"     {name} = {shown}")
        for suffix, body in CANNED_REPLIES.items():
            if url.endswith(suffix):
                return GatewayResponse(status_code=200, body=body, url=url)
        return GatewayResponse(status_code=404, body=b"", url=url)


def print_header(title):
    """Print a nice header."""
    print("\n")
    print("=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_checksum(client):
    print("\n1. MPG form fields with CheckValue:")
    fields = client.generate_mpg_params(
        MerchantOrderNo="ORDER1", Amt=100, ItemDesc="Widget",
        Email="buyer@example.com", LoginType=0,
    )
    print(f"   action: {client.form_action('mpg')}")
    print(f"   CheckValue: {fields['CheckValue']}")

    print("\n2. Verifying a callback CheckCode:")
    callback = {"Status": "SUCCESS", "MerchantID": "MS12345", "Amt": "100",
                "MerchantOrderNo": "ORDER1", "TradeNo": "16010112345678"}
    callback["CheckCode"] = client.checksums.make_check_code(callback)
    print(f"   valid: {client.verify_check_code(callback)}")
    print(f"   tampered: {client.verify_check_code(dict(callback, Amt='1'))}")


def demo_encryption(client):
    data = "MerchantOrderNo=ORDER1&Amt=100&IndexType=1"
    encrypted = client.encode_post_data("credit_card_deauthorize", data)
    print(f"\n   Plaintext: {data}")
    print(f"   PostData_: {encrypted[:48]}... ({len(encrypted) // 2} bytes)")
    print(f"   Decrypted: {client.decode_post_data('credit_card_deauthorize', encrypted)}")


def demo_api(client):
    print("\n1. Query trade info:")
    print(f"   → {client.query_trade_info(MerchantOrderNo='ORDER1', Amt=100)}")

    print("\n2. Cancel authorization:")
    print(f"   → {client.credit_card_deauthorize_by_merchant_order_no(MerchantOrderNo='ORDER1', Amt=100)}")

    print("\n3. Refund:")
    print(f"   → {client.credit_card_collect_refund_by_trade_no(TradeNo='16010112345678', Amt=100, CloseType=2)}")

    print("\n4. Issue e-invoice:")
    print(f"   → {client.generate_invoice(MerchantOrderNo='ORDER1', Status='1', Category='B2C', BuyerName='Test User', BuyerEmail='buyer@example.com', PrintFlag='Y', TaxType='1', TaxRate=5, Amt=95, TaxAmt=5, TotalAmt=100, ItemName='Widget', ItemCount=1, ItemUnit='pc', ItemPrice=100, ItemAmt=100)}")


def main():
    client = SpgatewayClient(DEMO_CONFIG, transport=CannedTransport())

    demos = {
        "checksum": ("CheckValue / CheckCode", demo_checksum),
        "encrypt": ("PostData_ Encryption", demo_encryption),
        "api": ("API Calls", demo_api),
    }

    selected = sys.argv[1:] or list(demos)
    for name in selected:
        if name not in demos:
            print(f"Unknown demo: {name}")
            print(__doc__)
            sys.exit(1)
        title, demo_func = demos[name]
        print_header(title)
        demo_func(client)


if __name__ == "__main__":
    main()
