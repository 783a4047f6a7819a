"""
Return URL factory.

Builds the notification, success and failure URLs sent to the gateway.
"""

from dataclasses import dataclass
from typing import Optional

from models.payment import PaymentUrls


@dataclass(frozen=True)
class UrlFactory:
    """
    URL templates for a merchant integration.

    Success and failure templates may contain {order_id}.
    """

    merchant_url: str
    url_ok_template: str
    url_ko_template: str

    @classmethod
    def from_config(cls, url_config: Optional[object] = None) -> 'UrlFactory':
        """Create the factory from the URLConfig section."""
        if url_config is None:
            from config import config
            url_config = config.urls

        return cls(
            merchant_url=url_config.merchant_url,
            url_ok_template=url_config.url_ok,
            url_ko_template=url_config.url_ko
        )

    def url_ok(self, order_id: str) -> str:
        return self.url_ok_template.format(order_id=order_id)

    def url_ko(self, order_id: str) -> str:
        return self.url_ko_template.format(order_id=order_id)

    def urls_for(self, order_id: str) -> PaymentUrls:
        """All three URLs for one order."""
        return PaymentUrls(
            merchant_url=self.merchant_url,
            url_ok=self.url_ok(order_id),
            url_ko=self.url_ko(order_id)
        )
