"""Tests for letsencrypt_renewal.renewal."""

import inspect
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import make_params

from letsencrypt_renewal.config import ConfigurationError
from letsencrypt_renewal.environment import AcmeConfig, AzureWebAppEnvironment, CertificateServiceSettings
from letsencrypt_renewal.renewal import RenewalManager, find_missing_host_names

_STAGING_URI = "https://acme-staging-v02.api.letsencrypt.org/directory"


class StubPasswordGenerator:
    def generate(self):
        return "fixed-password"


def _make_manager(covered=()):
    engine = MagicMock()
    engine.add_certificate = AsyncMock()
    engine.renew_certificate = AsyncMock()
    engine_factory = MagicMock(return_value=engine)
    lookup = AsyncMock(return_value=set(covered))
    manager = RenewalManager(
        engine_factory=engine_factory,
        host_name_lookup=lookup,
        password_generator=StubPasswordGenerator(),
    )
    return manager, engine_factory, engine, lookup


# --- find_missing_host_names ---


def test_missing_host_names_case_insensitive():
    assert find_missing_host_names(["a.com", "b.com"], {"A.COM", "b.com"}) == []


def test_missing_host_names_keep_request_order():
    assert find_missing_host_names(["c.com", "a.com", "b.com"], {"a.com"}) == ["c.com", "b.com"]


def test_missing_host_names_deduplicate():
    assert find_missing_host_names(["a.com", "A.com"], set()) == ["a.com"]


# --- Preconditions ---


def test_renew_none_fails_before_any_work():
    manager, engine_factory, _engine, lookup = _make_manager()

    with pytest.raises(ValueError, match="renewal_params"):
        manager.renew(None)

    engine_factory.assert_not_called()
    lookup.assert_not_called()


def test_renew_returns_awaitable():
    manager, *_ = _make_manager()
    awaitable = manager.renew(make_params())
    assert inspect.isawaitable(awaitable)
    awaitable.close()


# --- Engine construction ---


@pytest.mark.asyncio
async def test_engine_built_from_derived_configuration():
    manager, engine_factory, _engine, _lookup = _make_manager()

    await manager.renew(make_params(hosts=["www.a.com", "a.com"], use_ip_based_ssl=True, rsa_key_length=4096))

    web_app_environment, acme_config, service_settings = engine_factory.call_args.args
    assert isinstance(web_app_environment, AzureWebAppEnvironment)
    assert web_app_environment.web_app_name == "mysite"
    assert acme_config == AcmeConfig(
        host="www.a.com",
        alternate_names=("a.com",),
        registration_email="admin@example.com",
        rsa_key_length=4096,
        pfx_password="fixed-password",
        base_uri="https://acme-v02.api.letsencrypt.org/directory",
    )
    assert service_settings == CertificateServiceSettings(use_ip_based_ssl=True)


@pytest.mark.asyncio
async def test_fresh_password_per_renewal():
    generator = MagicMock()
    generator.generate.side_effect = ["pw-1", "pw-2"]
    engine = MagicMock(add_certificate=AsyncMock(), renew_certificate=AsyncMock())
    engine_factory = MagicMock(return_value=engine)
    manager = RenewalManager(engine_factory, host_name_lookup=AsyncMock(), password_generator=generator)

    await manager.renew(make_params())
    await manager.renew(make_params())

    passwords = [call.args[1].pfx_password for call in engine_factory.call_args_list]
    assert passwords == ["pw-1", "pw-2"]


# --- Decision policy ---


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [0, -1, -30])
async def test_non_positive_threshold_always_adds_new_certificate(days):
    manager, _factory, engine, lookup = _make_manager(covered={"a.com", "b.com"})

    await manager.renew(make_params(renew_x_number_of_days_before_expiration=days))

    lookup.assert_not_called()
    engine.add_certificate.assert_awaited_once_with()
    engine.renew_certificate.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("covered", [{"a.com", "b.com"}, {"A.COM", "b.com"}, {"a.com", "B.Com", "c.com"}])
async def test_all_hosts_covered_renews_existing_certificate(covered):
    manager, _factory, engine, _lookup = _make_manager(covered=covered)

    await manager.renew(make_params(renew_x_number_of_days_before_expiration=30))

    engine.renew_certificate.assert_awaited_once_with(force_renew=False, days_before_expiration=30)
    engine.add_certificate.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("covered", [{"a.com"}, set()])
async def test_missing_host_adds_new_certificate(covered):
    manager, _factory, engine, _lookup = _make_manager(covered=covered)

    await manager.renew(make_params(renew_x_number_of_days_before_expiration=30))

    engine.add_certificate.assert_awaited_once_with()
    engine.renew_certificate.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("acme_base_uri", "staging"),
    [(None, False), (_STAGING_URI, True), ("https://ACME-STAGING.example.com/dir", True)],
)
async def test_coverage_lookup_scoped_to_staging_or_production(acme_base_uri, staging):
    manager, engine_factory, _engine, lookup = _make_manager()

    await manager.renew(make_params(acme_base_uri=acme_base_uri, renew_x_number_of_days_before_expiration=10))

    web_app_environment = engine_factory.call_args.args[0]
    lookup.assert_awaited_once_with(web_app_environment, staging)


# --- DNS challenge gate ---


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [-1, 30])
async def test_dns_challenge_is_rejected(days):
    manager, engine_factory, engine, lookup = _make_manager(covered={"a.com", "b.com"})
    params = make_params(
        azure_dns_zone_name="example.com",
        azure_dns_relative_record_set_name="_acme-challenge",
        renew_x_number_of_days_before_expiration=days,
    )

    with pytest.raises(ConfigurationError, match="Azure DNS challenge currently not supported"):
        await manager.renew(params)

    engine_factory.assert_not_called()
    lookup.assert_not_called()
    engine.add_certificate.assert_not_called()
    engine.renew_certificate.assert_not_called()


@pytest.mark.asyncio
async def test_partial_dns_configuration_is_ignored():
    manager, _factory, engine, _lookup = _make_manager()

    await manager.renew(make_params(azure_dns_zone_name="example.com"))

    engine.add_certificate.assert_awaited_once_with()


# --- Failure propagation ---


@pytest.mark.asyncio
async def test_engine_failure_propagates_unchanged():
    manager, _factory, engine, _lookup = _make_manager()
    error = RuntimeError("ACME order failed")
    engine.add_certificate.side_effect = error

    with pytest.raises(RuntimeError) as exc_info:
        await manager.renew(make_params())

    assert exc_info.value is error
    engine.add_certificate.assert_awaited_once()


@pytest.mark.asyncio
async def test_lookup_failure_propagates_without_engine_call():
    manager, _factory, engine, lookup = _make_manager()
    lookup.side_effect = ConnectionError("management endpoint unreachable")

    with pytest.raises(ConnectionError, match="unreachable"):
        await manager.renew(make_params(renew_x_number_of_days_before_expiration=30))

    engine.add_certificate.assert_not_called()
    engine.renew_certificate.assert_not_called()


def test_default_password_generator_is_created():
    manager = RenewalManager(engine_factory=MagicMock())
    assert manager._password_generator.generate() != manager._password_generator.generate()
