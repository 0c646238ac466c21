"""PFX export password generation."""

from __future__ import annotations

import secrets
from base64 import b64encode

_PASSWORD_BYTES = 32


class PfxPasswordGenerator:
    """Generate PFX export passwords from the operating system CSPRNG.

    Holds no state between calls, so one instance can be shared by concurrent renewals.
    """

    def __init__(self, num_bytes: int = _PASSWORD_BYTES) -> None:
        if num_bytes <= 0:
            raise ValueError(f"num_bytes must be a positive integer, got: {num_bytes}")
        self._num_bytes = num_bytes

    def generate(self) -> str:
        """Return ``num_bytes`` random bytes, base64 encoded."""
        return b64encode(secrets.token_bytes(self._num_bytes)).decode()
