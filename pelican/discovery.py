"""Discovery of the thermostats configured on a Pelican site."""

from __future__ import annotations

import logging

import aiohttp

from .api import RESTClient
from .codecs.pelican_codec import decode_discovery_result, decode_site_result
from .config import load_timezone
from .const import DISCOVERY_FIELDS, OBJECT_SITE, OBJECT_THERMOSTAT, SITE_FIELDS
from .device import Pelican
from .errors import InvalidParameterError, MalformedResponseError, VendorError

_LOGGER = logging.getLogger(__name__)


async def discover_pelicans(
    session: aiohttp.ClientSession,
    username: str,
    password: str,
    site: str,
    *,
    api_url: str | None = None,
) -> list[Pelican]:
    """Return a handle for every named thermostat on ``site``.

    All handles share the site timezone reported by the ``Site`` object.
    """

    client = RESTClient(session, username, password, site, api_url=api_url)

    listing = decode_discovery_result(
        await client.query(OBJECT_THERMOSTAT, None, DISCOVERY_FIELDS)
    )
    if not listing.ok:
        raise VendorError(
            listing.message, context=f"Error listing thermostats for site {site}"
        )

    site_result = decode_site_result(
        await client.query(OBJECT_SITE, None, SITE_FIELDS)
    )
    if not site_result.ok:
        raise VendorError(
            site_result.message, context=f"Error retrieving timezone for site {site}"
        )
    try:
        timezone = load_timezone(site_result.attribute.time_zone)
    except InvalidParameterError as err:
        raise MalformedResponseError(
            f"Site {site} reported an invalid timezone "
            f"{site_result.attribute.time_zone!r}"
        ) from err

    pelicans = [
        Pelican(
            session,
            username,
            password,
            site,
            summary.name,
            timezone,
            api_url=api_url,
        )
        for summary in listing.thermostats
        if summary.name
    ]
    _LOGGER.debug("Discovered %d thermostats on site %s", len(pelicans), site)
    return pelicans


__all__ = ["discover_pelicans"]
