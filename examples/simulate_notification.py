#!/usr/bin/env python3
"""
Example: Simulate a gateway notification for testing.

This script signs a notification the way the gateway does and posts it
to a running service, so the notification flow can be tested without
a real card payment.

Usage:
    python simulate_notification.py 0042 1999 --response 0000

Arguments:
    order: Order number as sent in DS_MERCHANT_ORDER
    amount: Amount in cents
"""

import argparse
import asyncio
import os
import sys
from datetime import datetime

import aiohttp

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import config
from models.credentials import MerchantCredentials
from services.codec import encode_parameters
from services.currency import to_numeric_code
from services.signature_service import SIGNATURE_VERSION, compute_signature


async def simulate_notification(
    order: str,
    amount: int,
    response: str = "0000",
    currency: str = "EUR",
    url: str = ""
) -> None:
    """Build a signed notification and post it to the service."""

    credentials = MerchantCredentials.from_config(config.redsys)
    now = datetime.now()

    parameters = {
        "Ds_Date": now.strftime("%d/%m/%Y"),
        "Ds_Hour": now.strftime("%H:%M"),
        "Ds_SecurePayment": "1",
        "Ds_Card_Country": "724",
        "Ds_Amount": str(amount),
        "Ds_Currency": to_numeric_code(currency),
        "Ds_Order": order,
        "Ds_MerchantCode": credentials.merchant_code,
        "Ds_Terminal": credentials.terminal,
        "Ds_Response": response,
        "Ds_MerchantData": "",
        "Ds_TransactionType": "0",
        "Ds_ConsumerLanguage": "1",
        "Ds_AuthorisationCode": "123456",
        "Ds_Card_Type": "C",
    }

    encoded = encode_parameters(parameters)
    fields = {
        "Ds_SignatureVersion": SIGNATURE_VERSION,
        "Ds_MerchantParameters": encoded,
        "Ds_Signature": compute_signature(credentials.secret, order, encoded),
    }

    print(f"Posting notification for order {order}")
    print(f"  Amount: {amount} ({currency})")
    print(f"  Ds_Response: {response}")
    print()

    async with aiohttp.ClientSession() as session:
        async with session.post(url, data=fields) as resp:
            body = await resp.text()
            if resp.status == 200:
                print(f"✅ Service answered {resp.status}: {body}")
            else:
                print(f"❌ Service answered {resp.status}: {body}")


async def main():
    parser = argparse.ArgumentParser(
        description='Simulate a gateway notification for testing'
    )
    parser.add_argument(
        'order',
        help='Order number (e.g., 0042)'
    )
    parser.add_argument(
        'amount',
        type=int,
        help='Amount in cents (e.g., 1999)'
    )
    parser.add_argument(
        '--response',
        default='0000',
        help='Ds_Response code (0000-0099 means accepted)'
    )
    parser.add_argument(
        '--currency',
        default='EUR',
        help='Currency code (default: EUR)'
    )
    parser.add_argument(
        '--url',
        default=f"http://localhost:{config.api.port}/redsys/notification",
        help='Notification endpoint'
    )

    args = parser.parse_args()

    await simulate_notification(
        order=args.order,
        amount=args.amount,
        response=args.response,
        currency=args.currency,
        url=args.url
    )


if __name__ == '__main__':
    asyncio.run(main())
