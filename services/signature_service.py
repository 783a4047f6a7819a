"""
Signature Service for Redsys HMAC_SHA256_V1

Derives a per-order key from the merchant secret and signs the encoded
merchant parameters with HMAC-SHA256.

The 3DES derivation is mandated by the gateway, it is kept only for
interoperability. Swap the key deriver if the gateway ever changes it.
"""
import base64
import hashlib
import hmac
from typing import Callable, Union

from Crypto.Cipher import DES3

from exceptions import InvalidCredentialsError

SIGNATURE_VERSION = "HMAC_SHA256_V1"

BLOCK_SIZE = DES3.block_size
ZERO_IV = b"\0" * BLOCK_SIZE

KeyDeriver = Callable[[bytes, str], bytes]

_STANDARD_TO_URLSAFE = str.maketrans('+/', '-_')


def derive_key(secret: bytes, diversifier: str) -> bytes:
    """
    Diversify the merchant secret with the order number.

    The order is zero-padded to the 3DES block size and encrypted in CBC
    mode with a zero IV; the ciphertext is the signing key.

    Args:
        secret: Raw merchant secret (16 or 24 bytes)
        diversifier: Order number exactly as transmitted

    Returns:
        Diversified key

    Raises:
        InvalidCredentialsError: If the secret is not a usable 3DES key
    """
    data = diversifier.encode('utf-8')
    data += b"\0" * (-len(data) % BLOCK_SIZE)

    try:
        cipher = DES3.new(secret, DES3.MODE_CBC, iv=ZERO_IV)
    except ValueError as e:
        raise InvalidCredentialsError(
            "Secret key is not a valid 3DES key",
            {"error": str(e)}
        ) from e

    return cipher.encrypt(data)


def sign(encoded_parameters: Union[str, bytes], derived_key: bytes) -> bytes:
    """HMAC-SHA256 of the encoded parameters."""
    if isinstance(encoded_parameters, str):
        encoded_parameters = encoded_parameters.encode('utf-8')
    return hmac.new(derived_key, encoded_parameters, hashlib.sha256).digest()


def to_base64url(raw: bytes) -> str:
    """Standard base64 with +/ replaced by -_, padding kept."""
    return base64.b64encode(raw).decode('ascii').translate(_STANDARD_TO_URLSAFE)


def compute_signature(
    secret: bytes,
    diversifier: str,
    encoded_parameters: Union[str, bytes],
    key_deriver: KeyDeriver = derive_key
) -> str:
    """
    Compute the Ds_Signature value.

    Args:
        secret: Raw merchant secret
        diversifier: Order number exactly as transmitted
        encoded_parameters: Ds_MerchantParameters as transmitted
        key_deriver: Key diversification function

    Returns:
        Base64url signature
    """
    return to_base64url(sign(encoded_parameters, key_deriver(secret, diversifier)))


def verify_signature(
    expected: str,
    secret: bytes,
    diversifier: str,
    encoded_parameters: Union[str, bytes],
    key_deriver: KeyDeriver = derive_key
) -> bool:
    """
    Verify a received signature using constant-time comparison.

    Args:
        expected: Ds_Signature as received
        secret: Raw merchant secret
        diversifier: Order number from the notification
        encoded_parameters: Ds_MerchantParameters as received (not re-encoded)
        key_deriver: Key diversification function

    Returns:
        True if signature valid, False otherwise
    """
    # base64url output is always ASCII
    if not isinstance(expected, str) or not expected.isascii():
        return False

    computed = compute_signature(secret, diversifier, encoded_parameters, key_deriver)

    return hmac.compare_digest(
        computed.encode('ascii'),
        expected.encode('ascii')
    )


class SignatureEngine:
    """
    Signs and verifies merchant parameters for one signature version.

    Stateless apart from the key deriver, so one instance can be shared
    between threads.
    """

    version = SIGNATURE_VERSION

    def __init__(self, key_deriver: KeyDeriver = derive_key):
        self.key_deriver = key_deriver

    def derive_key(self, secret: bytes, diversifier: str) -> bytes:
        return self.key_deriver(secret, diversifier)

    def compute_signature(
        self,
        secret: bytes,
        diversifier: str,
        encoded_parameters: Union[str, bytes]
    ) -> str:
        return compute_signature(secret, diversifier, encoded_parameters, self.key_deriver)

    def verify(
        self,
        expected: str,
        secret: bytes,
        diversifier: str,
        encoded_parameters: Union[str, bytes]
    ) -> bool:
        return verify_signature(expected, secret, diversifier, encoded_parameters, self.key_deriver)
