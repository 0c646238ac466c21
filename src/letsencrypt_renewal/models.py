"""Immutable value objects describing a renewal request and its outcome."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, fields

from letsencrypt_renewal import validation


@dataclass(frozen=True)
class AzureEnvironmentParams:
    """Service principal and resource group used to reach an Azure subscription."""

    tenant_id: str
    subscription_id: str
    client_id: str
    client_secret: str = field(repr=False)
    resource_group: str

    def __post_init__(self) -> None:
        for name in ("tenant_id", "subscription_id", "client_id", "client_secret", "resource_group"):
            validation.verify_string(getattr(self, name), name)

    def __str__(self) -> str:
        return (
            f"tenant_id: {self.tenant_id}, subscription_id: {self.subscription_id}, "
            f"client_id: {self.client_id}, resource_group: {self.resource_group}"
        )


@dataclass(frozen=True)
class RenewalParameters:
    """Everything needed to request a certificate for one (web app, host set) pair.

    Instances are validated on construction and cannot be modified afterwards.
    Equality and hashing cover every field, including the order of ``hosts``;
    ``hosts[0]`` is the primary host used as the certificate subject.

    Optional strings given as ``""`` are stored as None. When
    ``azure_dns_environment_params`` is omitted the web app environment is used.
    """

    web_app_environment_params: AzureEnvironmentParams
    web_app: str
    hosts: Sequence[str]
    email: str
    service_plan_resource_group: str | None = None
    group_name: str | None = None
    site_slot_name: str | None = None
    azure_dns_environment_params: AzureEnvironmentParams | None = None
    azure_dns_zone_name: str | None = None
    azure_dns_relative_record_set_name: str | None = None
    use_ip_based_ssl: bool = False
    rsa_key_length: int = 2048
    acme_base_uri: str | None = None
    web_root_path: str | None = None
    renew_x_number_of_days_before_expiration: int = -1
    authentication_uri: str | None = None
    azure_token_audience: str | None = None
    azure_management_endpoint: str | None = None
    azure_default_website_domain_name: str | None = None

    def __post_init__(self) -> None:
        env = validation.verify_non_null(self.web_app_environment_params, "web_app_environment_params")
        self._set("web_app", validation.verify_string(self.web_app, "web_app"))
        self._set("hosts", validation.verify_hosts(self.hosts, "hosts"))
        self._set("email", validation.verify_email(self.email, "email"))
        for name in (
            "service_plan_resource_group",
            "group_name",
            "site_slot_name",
            "azure_dns_zone_name",
            "azure_dns_relative_record_set_name",
            "web_root_path",
        ):
            self._set(name, validation.verify_optional_string(getattr(self, name), name))
        if self.azure_dns_environment_params is None:
            self._set("azure_dns_environment_params", env)
        self._set("use_ip_based_ssl", validation.verify_bool(self.use_ip_based_ssl, "use_ip_based_ssl"))
        self._set("rsa_key_length", validation.verify_positive_integer(self.rsa_key_length, "rsa_key_length"))
        if isinstance(self.renew_x_number_of_days_before_expiration, bool) or not isinstance(
            self.renew_x_number_of_days_before_expiration, int
        ):
            raise ValueError(
                "renew_x_number_of_days_before_expiration must be an integer, "
                f"got: {self.renew_x_number_of_days_before_expiration!r}"
            )
        for name in ("acme_base_uri", "authentication_uri", "azure_token_audience", "azure_management_endpoint"):
            self._set(name, validation.verify_optional_uri(getattr(self, name), name))
        self._set(
            "azure_default_website_domain_name",
            validation.verify_optional_host_name(
                self.azure_default_website_domain_name, "azure_default_website_domain_name"
            ),
        )

    def _set(self, name: str, value: object) -> None:
        object.__setattr__(self, name, value)

    @property
    def web_app_full_name(self) -> str:
        """Web app name with the group suffix, e.g. ``mysite[blue]``."""
        return f"{self.web_app}[{self.group_name}]" if self.group_name else self.web_app

    def __str__(self) -> str:
        parts = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "hosts":
                value = ", ".join(value)
            parts.append(f"{f.name}: {'' if value is None else value}")
        return ", ".join(parts)


@dataclass(frozen=True)
class RenewalResult:
    """Output from a single web app renewal attempt."""

    web_app: str
    success: bool
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "web_app": self.web_app,
            "success": self.success,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> RenewalResult:
        return cls(
            web_app=data["web_app"],
            success=data["success"],
            error=data.get("error"),
        )
