"""Look up host names already covered by Let's Encrypt certificates bound to a web app."""

from __future__ import annotations

import logging

from azure.mgmt.web.aio import WebSiteManagementClient
from azure.mgmt.web.models import SslState
from cryptography import x509

from letsencrypt_renewal.auth import build_credential, management_scope
from letsencrypt_renewal.environment import AzureWebAppEnvironment

logger = logging.getLogger(__name__)

_PRODUCTION_ISSUER = "Let's Encrypt"
_STAGING_ISSUER_MARKERS = ("(STAGING)", "Fake LE")


def _issuer_of(certificate) -> str:
    """Return the issuer of an App Service certificate, preferring the DER blob."""
    if certificate.cer_blob:
        try:
            return x509.load_der_x509_certificate(bytes(certificate.cer_blob)).issuer.rfc4514_string()
        except ValueError:
            logger.warning("Could not parse certificate %s, falling back to its issuer field", certificate.thumbprint)
    return certificate.issuer or ""


def is_lets_encrypt_issuer(issuer: str, staging: bool) -> bool:
    """Whether ``issuer`` belongs to the Let's Encrypt staging or production hierarchy."""
    is_staging_issuer = any(marker in issuer for marker in _STAGING_ISSUER_MARKERS)
    if staging:
        return is_staging_issuer
    return _PRODUCTION_ISSUER in issuer and not is_staging_issuer


async def _bound_thumbprints(client: WebSiteManagementClient, environment: AzureWebAppEnvironment) -> set[str]:
    if environment.site_slot_name:
        site = await client.web_apps.get_slot(
            environment.resource_group, environment.web_app_name, environment.site_slot_name
        )
    else:
        site = await client.web_apps.get(environment.resource_group, environment.web_app_name)

    return {
        state.thumbprint.upper()
        for state in site.host_name_ssl_states or []
        if state.thumbprint and state.ssl_state != SslState.DISABLED
    }


async def _covered_host_names(
    client: WebSiteManagementClient,
    environment: AzureWebAppEnvironment,
    staging: bool,
) -> set[str]:
    thumbprints = await _bound_thumbprints(client, environment)
    host_names: set[str] = set()
    if not thumbprints:
        return host_names

    async for certificate in client.certificates.list_by_resource_group(environment.service_plan_resource_group):
        if not certificate.thumbprint or certificate.thumbprint.upper() not in thumbprints:
            continue
        if not is_lets_encrypt_issuer(_issuer_of(certificate), staging):
            continue
        host_names.update(certificate.host_names or [])
    return host_names


async def get_lets_encrypt_host_names(
    environment: AzureWebAppEnvironment,
    staging: bool,
    _web_client: WebSiteManagementClient | None = None,
) -> set[str]:
    """Return the host names covered by Let's Encrypt certificates bound to the web app.

    Only certificates whose thumbprint is bound to one of the site's (or slot's)
    SSL-enabled host names are considered, and only those issued by the staging
    or production hierarchy according to ``staging``.

    Args:
        environment: Resolved web app environment.
        staging: Look for staging certificates instead of production ones.
        _web_client: Pre-built management client; the caller keeps ownership.
    """
    if _web_client is not None:
        return await _covered_host_names(_web_client, environment, staging)

    async with build_credential(environment) as credential:
        async with WebSiteManagementClient(
            credential,
            environment.subscription_id,
            base_url=environment.management_endpoint,
            credential_scopes=[management_scope(environment)],
        ) as client:
            return await _covered_host_names(client, environment, staging)
