"""Shared fixtures for the Redsys gateway tests."""

import pytest

from models.credentials import MerchantCredentials
from models.payment import PaymentUrls
from services.codec import encode_parameters
from services.lifecycle import LifecycleDispatcher
from services.payment_manager import PaymentManager
from services.signature_service import SIGNATURE_VERSION, compute_signature
from services.url_factory import UrlFactory

# Public sandbox key from the gateway integration guide
TEST_SECRET_KEY = 'sq7HjrUOBfKmC576ILgskD5srU870gJ7'
TEST_MERCHANT_CODE = '999008881'
TEST_TERMINAL = '1'


@pytest.fixture
def credentials():
    return MerchantCredentials.from_base64(
        merchant_code=TEST_MERCHANT_CODE,
        terminal=TEST_TERMINAL,
        secret_key=TEST_SECRET_KEY
    )


@pytest.fixture
def urls():
    return PaymentUrls(
        merchant_url='https://shop.example.com/redsys/notification',
        url_ok='https://shop.example.com/payment/1/ok',
        url_ko='https://shop.example.com/payment/1/ko'
    )


@pytest.fixture
def url_factory():
    return UrlFactory(
        merchant_url='https://shop.example.com/redsys/notification',
        url_ok_template='https://shop.example.com/payment/{order_id}/ok',
        url_ko_template='https://shop.example.com/payment/{order_id}/ko'
    )


@pytest.fixture
def events():
    """Lifecycle events recorded by an observer."""
    return []


@pytest.fixture
def manager(credentials, url_factory, events):
    dispatcher = LifecycleDispatcher()
    dispatcher.on_event(events.append)
    return PaymentManager(
        credentials=credentials,
        url_factory=url_factory,
        gateway_url='https://sis-t.redsys.es:25443/sis/realizarPago',
        dispatcher=dispatcher
    )


def notification_parameters(order='0001', response='0000', **overrides):
    """Parameters as the gateway sends them in a notification."""
    parameters = {
        'Ds_Date': '18/10/2026',
        'Ds_Hour': '12:30',
        'Ds_SecurePayment': '1',
        'Ds_Card_Country': '724',
        'Ds_Amount': '100',
        'Ds_Currency': '978',
        'Ds_Order': order,
        'Ds_MerchantCode': TEST_MERCHANT_CODE,
        'Ds_Terminal': TEST_TERMINAL,
        'Ds_Response': response,
        'Ds_MerchantData': '',
        'Ds_TransactionType': '0',
        'Ds_ConsumerLanguage': '1',
        'Ds_AuthorisationCode': '082150',
    }
    parameters.update(overrides)
    return parameters


def signed_notification(credentials, parameters, diversifier=None):
    """Encode and sign parameters the way the gateway does."""
    encoded = encode_parameters(parameters)
    if diversifier is None:
        diversifier = parameters.get('Ds_Order') or parameters.get('DS_ORDER')
    return {
        'Ds_SignatureVersion': SIGNATURE_VERSION,
        'Ds_MerchantParameters': encoded,
        'Ds_Signature': compute_signature(credentials.secret, diversifier, encoded)
    }
