"""Request signing helpers."""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from decimal import Decimal
from typing import Any, Mapping


def current_nonce() -> int:
    """Return the current Unix time in whole seconds."""
    return int(time.time())


def _encode_value(value: Any) -> Any:
    # fixed-point, so Decimal("0.00000001") is sent as "0.00000001", not "1E-8"
    if isinstance(value, Decimal):
        return format(value, "f")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(fields: Mapping[str, Any]) -> str:
    """Serialize fields to compact JSON with sorted keys.

    The same field set always yields the same string, which is what the
    signature is computed over and what goes on the wire. ``Decimal`` values
    are sent as exact decimal strings.
    """
    return json.dumps(
        dict(fields),
        sort_keys=True,
        separators=(",", ":"),
        default=_encode_value,
    )


def generate_signature(secret: str, message: str) -> str:
    """Generate a hex-encoded HMAC-SHA512 signature.

    Args:
        secret: Secret key
        message: Message to sign

    Returns:
        Hex-encoded signature
    """
    return hmac.new(secret.encode(), message.encode(), hashlib.sha512).hexdigest()
