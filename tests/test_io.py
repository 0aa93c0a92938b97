#!/usr/bin/env python
# -*- encoding: utf-8 -*-
"""
Tests for the aiohttp transport.  The aiohttp session is mocked, there is
no network traffic.
"""
from unittest.mock import AsyncMock
from unittest.mock import MagicMock

import pytest
from multidict import CIMultiDict

from carddav import AsyncCardDAVClient
from carddav.io import AsyncIO
from carddav.io import AsyncIOProtocol
from carddav.protocol import CardDAVProtocol


def _mock_session(status=207, body=b"<multistatus/>", headers=None, url=""):
    response = MagicMock()
    response.status = status
    response.reason = "Multi-Status"
    response.headers = CIMultiDict(headers or {"Content-Type": "application/xml"})
    response.url = url
    response.read = AsyncMock(return_value=body)

    session = MagicMock()
    session.request.return_value.__aenter__.return_value = response
    session.request.return_value.__aexit__.return_value = False
    session.close = AsyncMock()
    return session


class TestAsyncIO:
    def test_protocol(self, server) -> None:
        assert isinstance(AsyncIO(), AsyncIOProtocol)
        assert isinstance(server, AsyncIOProtocol)

    @pytest.mark.asyncio
    async def test_execute(self) -> None:
        session = _mock_session(
            headers={"ETag": '"1"'}, url="https://dav.example.com/ab/"
        )
        io = AsyncIO(session=session)
        request = CardDAVProtocol("https://dav.example.com/ab/").propfind_request(
            "", ["getetag"], depth=1
        )

        response = await io.execute(request)

        session.request.assert_called_once_with(
            method="PROPFIND",
            url="https://dav.example.com/ab/",
            headers=request.headers,
            data=request.body,
        )
        assert response.status == 207
        assert response.body == b"<multistatus/>"
        assert response.header("etag") == '"1"'
        assert response.url == "https://dav.example.com/ab/"

    @pytest.mark.asyncio
    async def test_error_status_is_returned(self) -> None:
        io = AsyncIO(session=_mock_session(status=500, body=b"kaboom"))
        request = CardDAVProtocol("https://dav.example.com/ab/").get_request("a.vcf")
        response = await io.execute(request)
        assert response.status == 500
        assert not response.ok

    @pytest.mark.asyncio
    async def test_foreign_session_is_not_closed(self) -> None:
        session = _mock_session()
        async with AsyncIO(session=session):
            pass
        session.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_is_raised(self) -> None:
        session = MagicMock()
        session.request.side_effect = ConnectionError("network down")
        io = AsyncIO(session=session)
        with pytest.raises(ConnectionError):
            await io.execute(CardDAVProtocol("https://dav.example.com/").options_request())

    @pytest.mark.asyncio
    async def test_repeated_header_lines_are_folded(self) -> None:
        """Servers may announce their DAV compliance classes on several lines"""
        session = _mock_session(
            status=200,
            body=b"",
            headers=[
                ("DAV", "1, 2, access-control"),
                ("DAV", "addressbook"),
                ("Content-Length", "0"),
            ],
        )
        io = AsyncIO(session=session)
        response = await io.execute(
            CardDAVProtocol("https://dav.example.com/ab/").options_request()
        )
        assert response.header("dav") == "1, 2, access-control, addressbook"
        assert response.header("Content-Length") == "0"

        client = AsyncCardDAVClient("https://dav.example.com/ab/", io=io)
        assert await client.supports_address_book_access()
