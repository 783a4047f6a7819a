"""
Redsys HTTP API.

Exposes the payment request and notification flows over HTTP.
"""

import logging

from aiohttp import web

from config import config
from exceptions import (
    InvalidOrderNumberError,
    PaymentError,
    PaymentOrderNotFoundError,
    UnsupportedCurrencyError,
)
from models.outcome import OutcomeStatus, RejectionReason, ValidationResult
from models.payment import PaymentOrder
from services.payment_manager import PaymentManager

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    UnsupportedCurrencyError: 400,
    InvalidOrderNumberError: 400,
    PaymentOrderNotFoundError: 404,
}


def _error_status(error: PaymentError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


def _notification_status(result: ValidationResult) -> int:
    outcome = result.outcome
    if outcome.is_authenticated:
        return 200
    if outcome.status == OutcomeStatus.REJECTED and outcome.reason == RejectionReason.INVALID_SIGNATURE:
        return 403
    return 400


class RedsysAPI:
    """
    HTTP endpoints for the gateway integration.

    Endpoints:
    - POST /api/payment/request - Build the signed form fields for an order
    - POST /redsys/notification - Receive a gateway notification
    - GET /api/health - Health check
    """

    def __init__(self, manager: PaymentManager):
        """
        Initialize the API.

        Args:
            manager: Payment manager for the merchant account
        """
        self.manager = manager

    def setup_routes(self, app: web.Application) -> None:
        """
        Set up API routes.

        Args:
            app: aiohttp web application
        """
        app.router.add_post('/api/payment/request', self.payment_request)
        app.router.add_post('/redsys/notification', self.notification)
        app.router.add_get('/api/health', self.health_check)

    async def payment_request(self, request: web.Request) -> web.Response:
        """
        Build the signed form fields for an order.

        Request body:
        {
            "order": {
                "order_id": "42",
                "order_number": "42" (optional, defaults to order_id),
                "amount": 1999,
                "currency": "EUR",
                "extra_data": {"product_description": "..."} (optional)
            }
        }
        """
        try:
            data = await request.json()
        except Exception:
            return web.json_response(
                {"error": "Invalid JSON body"},
                status=400
            )

        if not isinstance(data, dict):
            return web.json_response(
                {"error": "Invalid JSON body"},
                status=400
            )

        order_data = data.get('order')
        order = None
        if order_data:
            if not isinstance(order_data, dict) or 'amount' not in order_data:
                return web.json_response(
                    {"error": "order.amount is required"},
                    status=400
                )
            if not (order_data.get('order_id') or order_data.get('order_number')):
                return web.json_response(
                    {"error": "order.order_id is required"},
                    status=400
                )
            order = PaymentOrder.from_dict(order_data)

        try:
            envelope = self.manager.process_payment(order)
        except PaymentError as e:
            status = _error_status(e)
            logger.warning(f"Payment request refused: {e.message}")
            return web.json_response(e.to_dict(), status=status)

        return web.json_response({
            "url": self.manager.gateway_url,
            "fields": envelope.to_form_fields()
        })

    async def notification(self, request: web.Request) -> web.Response:
        """Receive a notification posted by the gateway."""
        form = await request.post()
        fields = {key: form[key] for key in form.keys()}

        result = self.manager.process_result(fields)
        status = _notification_status(result)

        body = {"status": result.outcome.status.value}
        if result.outcome.is_authenticated:
            body["status"] = "accepted" if result.outcome.is_accepted else "declined"
            body["order"] = result.payload.order
            body["response_code"] = result.response_code
        else:
            body["error"] = result.outcome.to_dict()

        return web.json_response(body, status=status)

    async def health_check(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response({
            "status": "healthy",
            "service": config.service.name
        })


def create_app(manager: PaymentManager) -> web.Application:
    """
    Create and configure the aiohttp web application.

    Args:
        manager: Payment manager for the merchant account

    Returns:
        Configured aiohttp Application
    """
    app = web.Application()

    # Create API handler
    api = RedsysAPI(manager=manager)

    # Setup routes
    api.setup_routes(app)

    # Error handling middleware
    @web.middleware
    async def error_middleware(request, handler):
        try:
            return await handler(request)
        except web.HTTPException:
            raise
        except Exception as e:
            logger.error(f"Unhandled error: {e}", exc_info=True)
            return web.json_response(
                {"error": "Internal server error"},
                status=500
            )

    app.middlewares.append(error_middleware)

    return app
