"""
The aiohttp transport.

Statuses are never raised here, a 404 or 412 is handed back as a
DAVResponse like a 207 is; the components decide what an error is.
Connection problems (aiohttp.ClientError, timeouts) and cancellation
propagate as they are.
"""

import logging
from typing import Optional

import aiohttp

from carddav import __version__
from carddav.lib import error
from carddav.protocol.types import DAVRequest, DAVResponse

log = logging.getLogger(__name__)

USER_AGENT = "python-carddav/" + __version__


class AsyncIO:
    """
    Runs DAVRequests through an aiohttp ClientSession.

    The session is created lazily on the first request, inside the
    running event loop.  A session passed in by the caller is used as it
    is and left open on close().

    Example:
        async with AsyncIO(timeout=10) as io:
            request = protocol.propfind_request("", ["getetag"], depth=1)
            response = await io.execute(request)
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ):
        """
        Args:
            session: aiohttp ClientSession owned by the caller
            timeout: total timeout per request, in seconds
            verify_ssl: verify the server certificate
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.verify_ssl = verify_ssl

    def _session_for_request(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                connector=aiohttp.TCPConnector(ssl=self.verify_ssl),
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def execute(self, request: DAVRequest) -> DAVResponse:
        session = self._session_for_request()

        ## credentials are not logged
        log.debug(
            "%s %s %s",
            request.method.value,
            request.url,
            {k: v for k, v in request.headers.items() if k != "Authorization"},
        )
        if error.debug_dump_communication and request.body:
            log.debug("request body:\n%s", request.body.decode("utf-8", "replace"))

        async with session.request(
            method=request.method.value,
            url=request.url,
            headers=request.headers,
            data=request.body,
        ) as response:
            body = await response.read()
            log.debug("%s %s -> %i", request.method.value, request.url, response.status)
            if error.debug_dump_communication and body:
                log.debug("response body:\n%s", body.decode("utf-8", "replace"))
            ## response.url is where we ended up after redirects, the
            ## hrefs in the body are relative to that one
            ## a header sent on several lines (DAV: typically) is folded
            ## into one comma separated value, RFC 9110 section 5.3
            headers = {
                name: ", ".join(response.headers.getall(name))
                for name in response.headers.keys()
            }
            return DAVResponse(
                status=response.status,
                headers=headers,
                body=body,
                url=str(response.url),
            )

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AsyncIO":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
