"""
Ds_MerchantParameters codec.

Parameters travel as base64-wrapped JSON. Outbound we use the standard
alphabet; inbound the gateway may send the url-safe one.
"""

import base64
import binascii
import json
from typing import Any, Dict, Mapping, Union

from exceptions import MalformedPayloadError

_URLSAFE_TO_STANDARD = str.maketrans('-_', '+/')


def encode_parameters(parameters: Mapping[str, Any]) -> str:
    """
    Serialize parameters to compact JSON and base64-encode them.

    Key order is preserved, so the same mapping always encodes to the
    same string.

    Args:
        parameters: Ordered mapping of gateway keys to values

    Returns:
        Base64 string for Ds_MerchantParameters
    """
    payload_json = json.dumps(dict(parameters), separators=(',', ':'))
    return base64.b64encode(payload_json.encode('utf-8')).decode('ascii')


def decode_parameters(encoded: Union[str, bytes]) -> Dict[str, Any]:
    """
    Decode Ds_MerchantParameters back into a dictionary.

    Args:
        encoded: Base64 (standard or url-safe) JSON object

    Returns:
        Decoded parameters, in transmitted order

    Raises:
        MalformedPayloadError: If the value is not base64 JSON object
    """
    if isinstance(encoded, bytes):
        try:
            encoded = encoded.decode('ascii')
        except UnicodeDecodeError as e:
            raise MalformedPayloadError("Parameters are not ASCII") from e

    if not isinstance(encoded, str):
        raise MalformedPayloadError(
            "Parameters must be a string",
            {"type": type(encoded).__name__}
        )

    normalized = encoded.strip().translate(_URLSAFE_TO_STANDARD)
    # Some gateway versions strip the trailing padding
    normalized += '=' * (-len(normalized) % 4)

    try:
        decoded = base64.b64decode(normalized, validate=True)
        parameters = json.loads(decoded.decode('utf-8'))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        raise MalformedPayloadError(
            "Failed to decode merchant parameters",
            {"error": str(e)}
        ) from e

    if not isinstance(parameters, dict):
        raise MalformedPayloadError(
            "Merchant parameters must be a JSON object",
            {"type": type(parameters).__name__}
        )

    return parameters
