from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
import logging
from typing import Any

import aiohttp

from .backend.sanitize import redact_text
from .codecs.common import encode_clause, join_fields
from .codecs.pelican_codec import decode_envelope
from .const import API_URL_FMT, REQUEST_GET, REQUEST_SET, REQUEST_TIMEOUT
from .errors import MalformedResponseError, TransportError

_LOGGER = logging.getLogger(__name__)

# Toggle to preview bodies in debug logs (redacted). Leave False by default.
API_LOG_PREVIEW = False


class RESTClient:
    """Thin async client for the Pelican ``api.cgi`` endpoint of one site."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        username: str,
        password: str,
        site: str,
        *,
        api_url: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialise the REST client with authentication context."""
        self._session = session
        self._username = username
        self._password = password
        self._site = site
        self._api_url = api_url or API_URL_FMT.format(site=site)
        self._timeout = timeout

    @property
    def api_url(self) -> str:
        """Return the endpoint URL for the site."""

        return self._api_url

    @property
    def site(self) -> str:
        """Return the site identifier."""

        return self._site

    async def _request(self, params: Mapping[str, str]) -> dict[str, Any]:
        """Perform a GET request and return the decoded field bag.

        Network failures and HTTP error statuses raise ``TransportError``.
        Errors are logged WITHOUT secrets.
        """
        query = {
            "username": self._username,
            "password": self._password,
            **params,
        }
        url = self._api_url
        _LOGGER.debug(
            "HTTP GET %s request=%s object=%s",
            url,
            params.get("request"),
            params.get("object"),
        )
        try:
            async with self._session.request(
                "GET",
                url,
                params=query,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                ctype = resp.headers.get("Content-Type", "")
                try:
                    body_text = await resp.text()
                except UnicodeDecodeError as err:
                    raise MalformedResponseError(
                        f"Response body from {url} is not valid text: {err}"
                    ) from err

                if resp.status >= 400:
                    _LOGGER.error(
                        "HTTP error GET %s -> %s; body=%s",
                        url,
                        resp.status,
                        redact_text(body_text),
                    )
                    raise TransportError(
                        f"HTTP {resp.status} from {url}: {redact_text(body_text)}"
                    )
                if API_LOG_PREVIEW:
                    _LOGGER.debug(
                        "HTTP %s -> %s, ctype=%s, body[0:200]=%r",
                        url,
                        resp.status,
                        ctype,
                        (redact_text(body_text) or "")[:200],
                    )
                else:
                    _LOGGER.debug("HTTP %s -> %s, ctype=%s", url, resp.status, ctype)
        except TransportError:
            raise
        except asyncio.CancelledError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            _LOGGER.error(
                "Request GET %s failed (sanitized): %s", url, redact_text(str(err))
            )
            raise TransportError(
                f"Error contacting {url}: {redact_text(str(err)) or type(err).__name__}"
            ) from err

        return decode_envelope(body_text)

    # ----------------- Public API -----------------

    async def query(
        self,
        obj: str,
        selection: Mapping[str, Any] | None,
        fields: Iterable[str],
    ) -> dict[str, Any]:
        """Read ``fields`` of ``obj`` filtered by ``selection``."""

        params = {"request": REQUEST_GET, "object": obj}
        if selection:
            params["selection"] = encode_clause(selection)
        params["value"] = join_fields(fields)
        return await self._request(params)

    async def write(
        self,
        obj: str,
        selection: Mapping[str, Any],
        value: str,
    ) -> dict[str, Any]:
        """Write a pre-encoded value clause to ``obj`` matched by ``selection``."""

        params = {
            "request": REQUEST_SET,
            "object": obj,
            "selection": encode_clause(selection),
            "value": value,
        }
        return await self._request(params)
