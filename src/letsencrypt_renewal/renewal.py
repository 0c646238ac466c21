"""Decide between issuing a new certificate and renewing the existing one."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection

from letsencrypt_renewal.config import ConfigurationError
from letsencrypt_renewal.engine import CertificateEngineFactory
from letsencrypt_renewal.environment import (
    AzureWebAppEnvironment,
    CertificateServiceSettings,
    build_acme_config,
    build_azure_dns_environment,
    build_web_app_environment,
)
from letsencrypt_renewal.hostnames import get_lets_encrypt_host_names
from letsencrypt_renewal.models import RenewalParameters
from letsencrypt_renewal.passwords import PfxPasswordGenerator

logger = logging.getLogger(__name__)

HostNameLookup = Callable[[AzureWebAppEnvironment, bool], Awaitable[Collection[str]]]


def find_missing_host_names(requested: Collection[str], covered: Collection[str]) -> list[str]:
    """Requested host names absent from ``covered``, compared case-insensitively, in request order."""
    covered_folded = {name.casefold() for name in covered}
    missing: list[str] = []
    seen: set[str] = set()
    for name in requested:
        folded = name.casefold()
        if folded not in covered_folded and folded not in seen:
            seen.add(folded)
            missing.append(name)
    return missing


class RenewalManager:
    """Issue or renew the Let's Encrypt certificate of one web app per ``renew`` call.

    Args:
        engine_factory: Builds the certificate engine for a web app.
        host_name_lookup: Returns host names already covered by Let's Encrypt
            certificates on the web app.
        password_generator: Source of PFX export passwords.
    """

    def __init__(
        self,
        engine_factory: CertificateEngineFactory,
        host_name_lookup: HostNameLookup = get_lets_encrypt_host_names,
        password_generator: PfxPasswordGenerator | None = None,
    ) -> None:
        self._engine_factory = engine_factory
        self._host_name_lookup = host_name_lookup
        self._password_generator = password_generator or PfxPasswordGenerator()

    def renew(self, renewal_params: RenewalParameters) -> Awaitable[None]:
        """Return an awaitable that adds or renews the certificate for ``renewal_params``.

        Raises ValueError immediately, before anything is awaited, when
        ``renewal_params`` is None.
        """
        if renewal_params is None:
            raise ValueError("renewal_params must not be None")
        return self._renew(renewal_params)

    async def _renew(self, renewal_params: RenewalParameters) -> None:
        logger.info("Generating SSL certificate with parameters: %s", renewal_params)
        full_name = renewal_params.web_app_full_name

        logger.info("Generating secure PFX password for '%s'...", full_name)
        acme_config = build_acme_config(renewal_params, self._password_generator.generate())
        web_app_environment = build_web_app_environment(renewal_params)
        service_settings = CertificateServiceSettings(use_ip_based_ssl=renewal_params.use_ip_based_ssl)

        if build_azure_dns_environment(renewal_params) is not None:
            raise ConfigurationError("Azure DNS challenge currently not supported")
        logger.info(
            "Either azure_dns_zone_name or azure_dns_relative_record_set_name is not set for '%s', "
            "will not use Azure DNS challenge",
            full_name,
        )

        engine = self._engine_factory(web_app_environment, acme_config, service_settings)
        logger.info("Adding SSL cert for '%s'...", full_name)

        days = renewal_params.renew_x_number_of_days_before_expiration
        add_new_cert = True
        if days > 0:
            staging = acme_config.is_staging
            covered = await self._host_name_lookup(web_app_environment, staging)
            logger.info("Let's Encrypt host names (staging: %s): %s", staging, ", ".join(sorted(covered)))

            missing = find_missing_host_names(acme_config.host_names, covered)
            if missing:
                logger.info(
                    "Detected host name(s) with no associated Let's Encrypt certificates, "
                    "will add a new certificate: %s",
                    ", ".join(missing),
                )
            else:
                logger.info("All host names associated with Let's Encrypt certificates, will perform cert renewal")
                add_new_cert = False

        if add_new_cert:
            await engine.add_certificate()
        else:
            await engine.renew_certificate(force_renew=False, days_before_expiration=days)

        logger.info("Let's Encrypt SSL certs & bindings renewed for '%s'", full_name)
