"""Abstract base class for certificate engines."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from letsencrypt_renewal.environment import AcmeConfig, AzureWebAppEnvironment, CertificateServiceSettings


class CertificateEngine(ABC):
    """Interface for engines that issue and renew certificates bound to one web app.

    An engine is created per renewal, already scoped to the web app environment,
    ACME configuration and service settings it operates on.
    """

    @abstractmethod
    async def add_certificate(self) -> None:
        """Request a new certificate for all configured host names and bind it."""

    @abstractmethod
    async def renew_certificate(self, force_renew: bool, days_before_expiration: int) -> None:
        """Renew bound certificates that expire within ``days_before_expiration`` days.

        Args:
            force_renew: Renew regardless of the expiration date.
            days_before_expiration: Renewal window in days.
        """


CertificateEngineFactory = Callable[
    [AzureWebAppEnvironment, AcmeConfig, CertificateServiceSettings],
    CertificateEngine,
]
