"""
Merchant credentials model.

Represents the merchant account configured for one gateway integration.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from Crypto.Cipher import DES3

from exceptions import InvalidCredentialsError


@dataclass(frozen=True)
class MerchantCredentials:
    """
    Immutable merchant account data shared by every request.

    Attributes:
        merchant_code: FUC code assigned by the bank
        terminal: Terminal number
        secret: Shared secret, raw bytes (already base64-decoded)
    """

    merchant_code: str
    terminal: str
    secret: bytes = field(repr=False)

    def __post_init__(self):
        """Validate credential data."""
        self.validate()

    def validate(self) -> None:
        """
        Validate merchant configuration.

        Raises:
            InvalidCredentialsError: If configuration is invalid
        """
        if not self.merchant_code:
            raise InvalidCredentialsError("Merchant code is required")

        if not self.terminal:
            raise InvalidCredentialsError("Merchant terminal is required")

        if not self.secret:
            raise InvalidCredentialsError("Shared secret is required")

        if len(self.secret) not in DES3.key_size:
            raise InvalidCredentialsError(
                "Shared secret must be 16 or 24 bytes",
                {"length": len(self.secret)}
            )

        try:
            DES3.adjust_key_parity(self.secret)
        except ValueError as e:
            raise InvalidCredentialsError(
                "Shared secret is not a valid 3DES key",
                {"error": str(e)}
            ) from e

    @classmethod
    def from_base64(
        cls,
        merchant_code: str,
        terminal: str,
        secret_key: str
    ) -> 'MerchantCredentials':
        """
        Build credentials from the base64 secret issued by the bank.

        Args:
            merchant_code: Merchant code
            terminal: Terminal number
            secret_key: Base64-encoded shared secret

        Returns:
            MerchantCredentials instance

        Raises:
            InvalidCredentialsError: If the secret is not valid base64
        """
        try:
            secret = base64.b64decode(secret_key, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidCredentialsError(
                "Secret key is not valid base64",
                {"error": str(e)}
            ) from e

        return cls(
            merchant_code=str(merchant_code),
            terminal=str(terminal),
            secret=secret
        )

    @classmethod
    def from_config(cls, redsys_config: Optional[Any] = None) -> 'MerchantCredentials':
        """
        Build credentials from the service configuration.

        Args:
            redsys_config: RedsysConfig section, defaults to the global config

        Returns:
            MerchantCredentials instance
        """
        if redsys_config is None:
            from config import config
            redsys_config = config.redsys

        return cls.from_base64(
            merchant_code=redsys_config.merchant_code,
            terminal=redsys_config.merchant_terminal,
            secret_key=redsys_config.secret_key
        )

    def to_public_dict(self) -> Dict[str, Any]:
        """
        Convert credentials to a dictionary safe for logs and APIs.

        Returns:
            Dictionary representation without the secret
        """
        return {
            'merchant_code': self.merchant_code,
            'terminal': self.terminal,
            'secret': '***'
        }
