"""Use-time objects derived from RenewalParameters, with well-known Azure defaults."""

from __future__ import annotations

from dataclasses import dataclass, field

from letsencrypt_renewal.models import AzureEnvironmentParams, RenewalParameters

DEFAULT_WEBSITE_DOMAIN_NAME = "azurewebsites.net"
DEFAULT_ACME_BASE_URI = "https://acme-v02.api.letsencrypt.org/directory"
DEFAULT_AUTHENTICATION_URI = "https://login.windows.net/"
DEFAULT_AZURE_TOKEN_AUDIENCE = "https://management.core.windows.net/"
DEFAULT_MANAGEMENT_ENDPOINT = "https://management.azure.com"


@dataclass(frozen=True)
class AcmeConfig:
    """ACME request settings handed to the certificate engine."""

    host: str
    alternate_names: tuple[str, ...]
    registration_email: str
    rsa_key_length: int
    pfx_password: str = field(repr=False)
    base_uri: str

    @property
    def host_names(self) -> tuple[str, ...]:
        return (self.host, *self.alternate_names)

    @property
    def is_staging(self) -> bool:
        return "staging" in self.base_uri.lower()


@dataclass(frozen=True)
class AzureWebAppEnvironment:
    """Fully resolved location of a web app and the endpoints used to manage it."""

    tenant_id: str
    subscription_id: str
    client_id: str
    client_secret: str = field(repr=False)
    resource_group: str
    web_app_name: str
    service_plan_resource_group: str
    site_slot_name: str | None = None
    web_root_path: str | None = None
    default_website_domain_name: str = DEFAULT_WEBSITE_DOMAIN_NAME
    authentication_endpoint: str = DEFAULT_AUTHENTICATION_URI
    management_endpoint: str = DEFAULT_MANAGEMENT_ENDPOINT
    token_audience: str = DEFAULT_AZURE_TOKEN_AUDIENCE


@dataclass(frozen=True)
class AzureDnsEnvironment:
    """Azure DNS zone used to answer DNS-01 challenges."""

    tenant_id: str
    subscription_id: str
    client_id: str
    client_secret: str = field(repr=False)
    resource_group: str
    zone_name: str
    relative_record_set_name: str


@dataclass(frozen=True)
class CertificateServiceSettings:
    use_ip_based_ssl: bool = False


def resolve(value: str | None, default: str) -> str:
    """Return ``value`` unless it is unset, in which case return ``default``."""
    return default if value is None else value


def build_acme_config(params: RenewalParameters, pfx_password: str) -> AcmeConfig:
    return AcmeConfig(
        host=params.hosts[0],
        alternate_names=tuple(params.hosts[1:]),
        registration_email=params.email,
        rsa_key_length=params.rsa_key_length,
        pfx_password=pfx_password,
        base_uri=resolve(params.acme_base_uri, DEFAULT_ACME_BASE_URI),
    )


def _verify_ids(env: AzureEnvironmentParams | None, name: str) -> AzureEnvironmentParams:
    # Point-of-use assertion; validated RenewalParameters always satisfy it.
    if env is None or not env.subscription_id or not env.client_id:
        raise ValueError(f"{name} must provide a subscription id and a client id")
    return env


def build_web_app_environment(params: RenewalParameters) -> AzureWebAppEnvironment:
    """Build the web app environment, filling every unset endpoint with its default.

    The service plan resource group falls back to the web app resource group.
    """
    env = _verify_ids(params.web_app_environment_params, "web_app_environment_params")
    return AzureWebAppEnvironment(
        tenant_id=env.tenant_id,
        subscription_id=env.subscription_id,
        client_id=env.client_id,
        client_secret=env.client_secret,
        resource_group=env.resource_group,
        web_app_name=params.web_app,
        service_plan_resource_group=resolve(params.service_plan_resource_group, env.resource_group),
        site_slot_name=params.site_slot_name,
        web_root_path=params.web_root_path,
        default_website_domain_name=resolve(params.azure_default_website_domain_name, DEFAULT_WEBSITE_DOMAIN_NAME),
        authentication_endpoint=resolve(params.authentication_uri, DEFAULT_AUTHENTICATION_URI),
        management_endpoint=resolve(params.azure_management_endpoint, DEFAULT_MANAGEMENT_ENDPOINT),
        token_audience=resolve(params.azure_token_audience, DEFAULT_AZURE_TOKEN_AUDIENCE),
    )


def build_azure_dns_environment(params: RenewalParameters) -> AzureDnsEnvironment | None:
    """Build the DNS challenge environment, or None when no zone/record set is configured."""
    zone_name = params.azure_dns_zone_name
    relative_record_set_name = params.azure_dns_relative_record_set_name
    if zone_name is None or relative_record_set_name is None:
        return None

    env = _verify_ids(params.azure_dns_environment_params, "azure_dns_environment_params")
    return AzureDnsEnvironment(
        tenant_id=env.tenant_id,
        subscription_id=env.subscription_id,
        client_id=env.client_id,
        client_secret=env.client_secret,
        resource_group=env.resource_group,
        zone_name=zone_name,
        relative_record_set_name=relative_record_set_name,
    )
