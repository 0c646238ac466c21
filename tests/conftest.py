"""Shared test fixtures for azure-letsencrypt-webapp-renewal."""

import pytest

from letsencrypt_renewal.models import AzureEnvironmentParams, RenewalParameters


def make_environment_params(**overrides) -> AzureEnvironmentParams:
    defaults = {
        "tenant_id": "tenant-1",
        "subscription_id": "3f2504e0-4f89-11d3-9a0c-0305e82c3301",
        "client_id": "9b2c1e77-0d3e-4c34-8e2a-6e1f5b1d2c40",
        "client_secret": "s3cret",
        "resource_group": "rg-web",
    }
    defaults.update(overrides)
    return AzureEnvironmentParams(**defaults)


def make_params(**overrides) -> RenewalParameters:
    defaults = {
        "web_app_environment_params": make_environment_params(),
        "web_app": "mysite",
        "hosts": ["a.com", "b.com"],
        "email": "admin@example.com",
    }
    defaults.update(overrides)
    return RenewalParameters(**defaults)


@pytest.fixture
def env_params() -> AzureEnvironmentParams:
    return make_environment_params()


@pytest.fixture
def params() -> RenewalParameters:
    return make_params()
