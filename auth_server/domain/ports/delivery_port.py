from __future__ import annotations

from typing import Protocol


class DeliveryPort(Protocol):
    async def deliver(
        self,
        *,
        destination: str,
        code: str,
        purpose: str,
    ) -> None:
        """Send a verification code out-of-band (SMS gateway, mailer...)."""
