#!/usr/bin/env python3
"""
Redsys Payment Gateway Service.

Main entry point that serves the gateway integration:
- Payment request signing for the checkout form
- Notification endpoint for gateway callbacks

Usage:
    python main.py

Environment variables:
    See config.py for all configuration options.
"""

import asyncio
import logging
import os
import signal
import sys
from typing import Optional

from aiohttp import web

from config import config
from api.redsys_api import create_app
from services.lifecycle import LifecycleDispatcher, LifecycleEvent
from services.payment_manager import PaymentManager


# Configure logging
def setup_logging():
    """Configure logging based on config."""
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]

    if config.logging.file:
        # Ensure log directory exists
        log_dir = os.path.dirname(config.logging.file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(config.logging.file))

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=handlers
    )

    # Reduce noise from third-party libraries
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def log_lifecycle_event(event: LifecycleEvent) -> None:
    """Default observer: record lifecycle events in the service log."""
    logger.info(f"Order {event.order_id}: {event.event_type.value}")


class PaymentGatewayService:
    """
    Main service orchestrator.

    Wires the payment manager, its lifecycle observers and the
    REST API server.
    """

    def __init__(self):
        self.manager: Optional[PaymentManager] = None
        self.api_app: Optional[web.Application] = None
        self.api_runner: Optional[web.AppRunner] = None
        self._shutdown_event = asyncio.Event()

    async def start(self) -> None:
        """Start the API server."""
        logger.info("=" * 60)
        logger.info(f"Starting {config.service.name}")
        logger.info("=" * 60)

        # Validate configuration
        errors = config.validate()
        if errors:
            for error in errors:
                logger.error(f"Configuration error: {error}")
            raise ValueError("Invalid configuration")

        dispatcher = LifecycleDispatcher()
        dispatcher.on_event(log_lifecycle_event)
        self.manager = PaymentManager.from_config(dispatcher=dispatcher)

        logger.info("Starting API server...")
        self.api_app = create_app(self.manager)

        self.api_runner = web.AppRunner(self.api_app)
        await self.api_runner.setup()

        site = web.TCPSite(
            self.api_runner,
            config.api.host,
            config.api.port
        )
        await site.start()

        logger.info("=" * 60)
        logger.info("Service started successfully!")
        logger.info(f"API server running at http://{config.api.host}:{config.api.port}")
        logger.info(f"Gateway: {config.redsys.gateway_url}")
        logger.info("=" * 60)

    async def stop(self) -> None:
        """Stop the service gracefully."""
        logger.info("Initiating graceful shutdown...")

        if self.api_runner:
            await self.api_runner.cleanup()

        logger.info("Shutdown complete")
        self._shutdown_event.set()

    async def run(self) -> None:
        """Run the service until shutdown signal."""
        await self.start()

        # Wait for shutdown signal
        await self._shutdown_event.wait()

    def request_shutdown(self) -> None:
        """Request service shutdown."""
        asyncio.create_task(self.stop())


def handle_signal(service: PaymentGatewayService, sig: signal.Signals) -> None:
    """Handle shutdown signals."""
    logger.info(f"Received signal {sig.name}, initiating shutdown...")
    service.request_shutdown()


async def main() -> None:
    """Main entry point."""
    setup_logging()

    service = PaymentGatewayService()

    # Set up signal handlers
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda s=sig: handle_signal(service, s)
        )

    try:
        await service.run()
    except Exception as e:
        logger.error(f"Service error: {e}", exc_info=True)
        await service.stop()
        sys.exit(1)


if __name__ == '__main__':
    asyncio.run(main())
