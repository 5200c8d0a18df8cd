"""Driver initialization from settings."""

from __future__ import annotations

import logging
from typing import Dict

from ..settings import Settings
from .base import BaseDriver
from .factory import create_driver
from .request import HttpRequester, ProxyConfig, Request

logger = logging.getLogger(__name__)

# keyword arguments create_driver fills from the settings themselves
_RESERVED_OPTIONS = frozenset({"request", "markets"})


def create_requester_from_settings(settings: Settings) -> HttpRequester:
    """Build the shared HTTP requester from the http and proxy sections."""
    proxy = None
    if settings.proxy.enabled and settings.proxy.url:
        proxy = ProxyConfig(
            url=settings.proxy.url,
            username=settings.proxy.username,
            password=settings.proxy.password.get_secret_value() if settings.proxy.password else None,
        )
    return HttpRequester(
        timeout=settings.http.timeout,
        proxy=proxy,
        user_agent=settings.http.user_agent,
    )


def create_drivers_from_settings(settings: Settings, request: Request | None = None) -> Dict[str, BaseDriver]:
    """Create drivers from settings configuration.

    All drivers share one request collaborator; the caller owns it and must
    close it once the drivers are no longer used.
    """
    if request is None:
        request = create_requester_from_settings(settings)

    drivers: Dict[str, BaseDriver] = {}

    for driver_name, driver_config in settings.drivers.items():
        if not driver_config.enabled:
            logger.debug("Driver %s is disabled, skipping", driver_name)
            continue

        options = dict(driver_config.options)
        for key in sorted(_RESERVED_OPTIONS & options.keys()):
            logger.warning("Driver %s: %r is not a driver option, ignoring it", driver_name, key)
            del options[key]

        try:
            driver = create_driver(
                driver_name,
                request,
                markets=driver_config.markets,
                **options,
            )
        except (ValueError, TypeError) as e:
            logger.error("Failed to initialize driver %s: %s", driver_name, e)
            continue

        drivers[driver_name] = driver
        logger.info("Initialized driver %s", driver_name)

    return drivers
