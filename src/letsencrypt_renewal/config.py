"""Configuration loading and validation from environment variables.

Web apps are listed in ``LETSENCRYPT_WEBAPPS`` (``;``-separated, entries may carry a
group as ``name[group]``). Every per web app setting is read from
``LETSENCRYPT_<KEY>_<SETTING>`` and falls back to the shared
``LETSENCRYPT_<SETTING>``, where ``<KEY>`` is the upper-cased web app name (and
group) with anything but letters and digits replaced by ``_``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from letsencrypt_renewal.models import AzureEnvironmentParams, RenewalParameters

_PREFIX = "LETSENCRYPT_"
_WEBAPPS_VAR = "LETSENCRYPT_WEBAPPS"
_ENGINE_FACTORY_VAR = "LETSENCRYPT_ENGINE_FACTORY"
_LIST_SEPARATOR = ";"
_WEBAPP_ENTRY_RE = re.compile(r"^(?P<name>[^\[\]]+?)(?:\[(?P<group>[^\[\]]+)\])?$")
_KEY_SANITIZE_RE = re.compile(r"[^A-Z0-9]")
_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


class ConfigurationError(ValueError):
    """Raised for missing, malformed or unsupported configuration."""


@dataclass(frozen=True)
class WebAppTarget:
    """A web app listed for renewal, optionally qualified by a group name."""

    name: str
    group_name: str | None = None

    @property
    def key(self) -> str:
        raw = self.name if self.group_name is None else f"{self.name}_{self.group_name}"
        return _KEY_SANITIZE_RE.sub("_", raw.upper())

    def __str__(self) -> str:
        return self.name if self.group_name is None else f"{self.name}[{self.group_name}]"

    @classmethod
    def parse(cls, entry: str) -> WebAppTarget:
        match = _WEBAPP_ENTRY_RE.match(entry.strip())
        if not match:
            raise ConfigurationError(f"{_WEBAPPS_VAR} contains an invalid entry: {entry!r}")
        return cls(name=match.group("name").strip(), group_name=match.group("group"))


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(_LIST_SEPARATOR) if item.strip()]


class _Settings:
    """Per web app view over the environment with shared fallbacks."""

    def __init__(self, target: WebAppTarget) -> None:
        self._app_prefix = f"{_PREFIX}{target.key}_"

    def get(self, name: str) -> str | None:
        for var in (self._app_prefix + name, _PREFIX + name):
            value = os.environ.get(var)
            if value:
                return value
        return None

    def require(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise ConfigurationError(f"Required environment variable {self._app_prefix}{name} is not set")
        return value

    def get_int(self, name: str, default: int) -> int:
        raw = self.get(name)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(f"{name} must be an integer, got: {raw!r}")

    def get_bool(self, name: str, default: bool) -> bool:
        raw = self.get(name)
        if raw is None:
            return default
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"{name} must be a boolean, got: {raw!r}")

    def environment_params(self, prefix: str = "") -> AzureEnvironmentParams:
        return AzureEnvironmentParams(
            tenant_id=self.require(prefix + "TENANT_ID"),
            subscription_id=self.require(prefix + "SUBSCRIPTION_ID"),
            client_id=self.require(prefix + "CLIENT_ID"),
            client_secret=self.require(prefix + "CLIENT_SECRET"),
            resource_group=self.require(prefix + "RESOURCE_GROUP"),
        )

    def has_any(self, prefix: str) -> bool:
        names = ("TENANT_ID", "SUBSCRIPTION_ID", "CLIENT_ID", "CLIENT_SECRET", "RESOURCE_GROUP")
        return any(self.get(prefix + name) for name in names)


def load_web_apps() -> list[WebAppTarget]:
    """Return the web apps listed in ``LETSENCRYPT_WEBAPPS``."""
    raw = os.environ.get(_WEBAPPS_VAR)
    if not raw:
        raise ConfigurationError(f"Required environment variable {_WEBAPPS_VAR} is not set")
    return [WebAppTarget.parse(entry) for entry in _split_list(raw)]


def load_renewal_parameters(target: WebAppTarget) -> RenewalParameters:
    """Load and validate the renewal parameters of one web app from environment variables."""
    settings = _Settings(target)
    dns_params = settings.environment_params("AZURE_DNS_") if settings.has_any("AZURE_DNS_") else None

    return RenewalParameters(
        web_app_environment_params=settings.environment_params(),
        web_app=target.name,
        hosts=_split_list(settings.require("HOSTS")),
        email=settings.require("EMAIL"),
        service_plan_resource_group=settings.get("SERVICE_PLAN_RESOURCE_GROUP"),
        group_name=target.group_name,
        site_slot_name=settings.get("SITE_SLOT_NAME"),
        azure_dns_environment_params=dns_params,
        azure_dns_zone_name=settings.get("AZURE_DNS_ZONE_NAME"),
        azure_dns_relative_record_set_name=settings.get("AZURE_DNS_RELATIVE_RECORD_SET_NAME"),
        use_ip_based_ssl=settings.get_bool("USE_IP_BASED_SSL", False),
        rsa_key_length=settings.get_int("RSA_KEY_LENGTH", 2048),
        acme_base_uri=settings.get("ACME_BASE_URI"),
        web_root_path=settings.get("WEB_ROOT_PATH"),
        renew_x_number_of_days_before_expiration=settings.get_int("RENEW_X_NUMBER_OF_DAYS_BEFORE_EXPIRATION", -1),
        authentication_uri=settings.get("AUTHENTICATION_URI"),
        azure_token_audience=settings.get("AZURE_TOKEN_AUDIENCE"),
        azure_management_endpoint=settings.get("AZURE_MANAGEMENT_ENDPOINT"),
        azure_default_website_domain_name=settings.get("AZURE_DEFAULT_WEBSITE_DOMAIN_NAME"),
    )


def load_engine_factory_path() -> str:
    value = os.environ.get(_ENGINE_FACTORY_VAR)
    if not value:
        raise ConfigurationError(f"Required environment variable {_ENGINE_FACTORY_VAR} is not set")
    return value
