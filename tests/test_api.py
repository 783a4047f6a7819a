"""
HTTP tests for the Redsys API.

Run with: pytest tests/test_api.py -v
"""

import pytest

from api.redsys_api import create_app
from services.codec import decode_parameters

from conftest import notification_parameters, signed_notification


@pytest.fixture
async def client(aiohttp_client, manager):
    return await aiohttp_client(create_app(manager))


class TestPaymentRequestEndpoint:
    """Tests for POST /api/payment/request."""

    async def test_returns_form_fields(self, client):
        resp = await client.post('/api/payment/request', json={
            'order': {'order_id': '15', 'amount': 2500, 'currency': 'EUR'}
        })

        assert resp.status == 200
        data = await resp.json()
        assert data['url'] == 'https://sis-t.redsys.es:25443/sis/realizarPago'
        assert data['fields']['Ds_SignatureVersion'] == 'HMAC_SHA256_V1'
        parameters = decode_parameters(data['fields']['Ds_MerchantParameters'])
        assert parameters['DS_MERCHANT_ORDER'] == '0015'

    async def test_unsupported_currency(self, client):
        resp = await client.post('/api/payment/request', json={
            'order': {'order_id': '15', 'amount': 2500, 'currency': 'XYZ'}
        })

        assert resp.status == 400
        data = await resp.json()
        assert data['error_code'] == 'redsys:currency:unsupported'

    async def test_missing_order(self, client):
        resp = await client.post('/api/payment/request', json={})

        assert resp.status == 404
        data = await resp.json()
        assert data['error_code'] == 'redsys:order:not_found'

    async def test_missing_amount(self, client):
        resp = await client.post('/api/payment/request', json={'order': {'order_id': '15'}})

        assert resp.status == 400

    async def test_invalid_json(self, client):
        resp = await client.post('/api/payment/request', data='not json')

        assert resp.status == 400


class TestNotificationEndpoint:
    """Tests for POST /redsys/notification."""

    async def test_accepted(self, client, credentials, events):
        fields = signed_notification(credentials, notification_parameters(response='0000'))

        resp = await client.post('/redsys/notification', data=fields)

        assert resp.status == 200
        data = await resp.json()
        assert data['status'] == 'accepted'
        assert data['order'] == '0001'
        assert data['response_code'] == 0
        assert len(events) == 2

    async def test_declined(self, client, credentials):
        fields = signed_notification(credentials, notification_parameters(response='184'))

        resp = await client.post('/redsys/notification', data=fields)

        assert resp.status == 200
        data = await resp.json()
        assert data['status'] == 'declined'
        assert data['response_code'] == 184

    async def test_invalid_signature(self, client, credentials, events):
        fields = signed_notification(credentials, notification_parameters())
        fields['Ds_Signature'] = 'A' * 44

        resp = await client.post('/redsys/notification', data=fields)

        assert resp.status == 403
        data = await resp.json()
        assert data['error']['reason'] == 'invalid_signature'
        assert events == []

    async def test_missing_field(self, client, credentials):
        fields = signed_notification(credentials, notification_parameters())
        del fields['Ds_Signature']

        resp = await client.post('/redsys/notification', data=fields)

        assert resp.status == 400
        data = await resp.json()
        assert data['status'] == 'missing_field'
        assert data['error']['field_name'] == 'Ds_Signature'

    async def test_malformed_payload(self, client):
        resp = await client.post('/redsys/notification', data={
            'Ds_SignatureVersion': 'HMAC_SHA256_V1',
            'Ds_MerchantParameters': '%%%',
            'Ds_Signature': 'abc',
        })

        assert resp.status == 400
        data = await resp.json()
        assert data['status'] == 'malformed_payload'


class TestHealthEndpoint:

    async def test_health(self, client):
        resp = await client.get('/api/health')

        assert resp.status == 200
        data = await resp.json()
        assert data['status'] == 'healthy'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
