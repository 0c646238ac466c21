"""Service principal credentials for Azure Resource Manager calls."""

from __future__ import annotations

from azure.identity.aio import ClientSecretCredential

from letsencrypt_renewal.environment import AzureWebAppEnvironment


def build_credential(environment: AzureWebAppEnvironment) -> ClientSecretCredential:
    """Return an async credential for the environment's service principal.

    The caller owns the credential and must close it (``async with``).
    """
    return ClientSecretCredential(
        tenant_id=environment.tenant_id,
        client_id=environment.client_id,
        client_secret=environment.client_secret,
        authority=environment.authentication_endpoint,
    )


def management_scope(environment: AzureWebAppEnvironment) -> str:
    """OAuth scope for the environment's token audience, e.g. ``https://management.core.windows.net/.default``."""
    return environment.token_audience.rstrip("/") + "/.default"
