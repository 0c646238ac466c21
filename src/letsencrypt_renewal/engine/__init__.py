"""Certificate engine loader — resolve a dotted path to an engine factory."""

from __future__ import annotations

import importlib
import logging

from letsencrypt_renewal.config import ConfigurationError
from letsencrypt_renewal.engine.base import CertificateEngine, CertificateEngineFactory

__all__ = ["CertificateEngine", "CertificateEngineFactory", "load_engine_factory"]

logger = logging.getLogger(__name__)


def load_engine_factory(path: str) -> CertificateEngineFactory:
    """Import a certificate engine factory by path.

    Args:
        path: ``package.module:attribute`` or ``package.module.attribute``. The
            attribute is any callable taking ``(web_app_environment, acme_config,
            service_settings)`` and returning a CertificateEngine; a
            CertificateEngine subclass qualifies.

    Returns:
        The imported factory.
    """
    if ":" in path:
        module_path, _, attr = path.partition(":")
    else:
        module_path, _, attr = path.rpartition(".")
    if not module_path or not attr:
        raise ConfigurationError(
            f"Invalid certificate engine factory '{path}': expected 'package.module:attribute'"
        )

    try:
        module = importlib.import_module(module_path)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"Failed to load certificate engine factory '{path}': {exc}") from exc

    if not callable(factory):
        raise ConfigurationError(f"Certificate engine factory '{path}' is not callable")
    if isinstance(factory, type) and not issubclass(factory, CertificateEngine):
        raise ConfigurationError(f"Certificate engine class '{path}' must be a subclass of CertificateEngine")

    logger.info("Loaded certificate engine factory %s", path)
    return factory
