#!/usr/bin/env python
# -*- encoding: utf-8 -*-
import pytest
from lxml import etree

from carddav import EntityFetcher
from carddav.entities import ResourceId
from carddav.lib import error
from carddav.protocol import DAVResponse

VCARD = "BEGIN:VCARD\r\nVERSION:3.0\r\nUID:%s\r\nFN:%s\r\nEND:VCARD\r\n"


class TestEntityFetcher:
    def _ids(self, server, *paths):
        return [ResourceId.from_href(p, server.collection_url) for p in paths]

    @pytest.mark.asyncio
    async def test_fetch(self, server) -> None:
        a = server.add_contact("a.vcf", VCARD % ("a", "Alice & Bob <3"))
        b = server.add_contact("jørn.vcf", VCARD % ("b", "Jørn"))
        fetcher = EntityFetcher(server.collection_url, io=server)

        entities = await fetcher.fetch_entities(self._ids(server, a, "/addressbooks/me/default/j%C3%B8rn.vcf"))

        assert [e.payload for e in entities] == [
            VCARD % ("a", "Alice & Bob <3"),
            VCARD % ("b", "Jørn"),
        ]
        assert entities[1].id.path == b
        (request,) = server.requests
        root = etree.fromstring(request.body)
        assert root.find(".//{urn:ietf:params:xml:ns:carddav}address-data") is not None
        assert [x.text for x in root.findall("{DAV:}href")] == [
            "/addressbooks/me/default/a.vcf",
            "/addressbooks/me/default/j%C3%B8rn.vcf",
        ]

    @pytest.mark.asyncio
    async def test_missing_and_unparseable_are_skipped(self, server) -> None:
        a = server.add_contact("a.vcf", VCARD % ("a", "Alice"))
        vlist = server.add_contact("list.vcf", "BEGIN:VLIST\r\nEND:VLIST\r\n", "text/x-vlist")
        empty = server.add_contact("empty.vcf", "")
        fetcher = EntityFetcher(server.collection_url, io=server)

        entities = await fetcher.fetch_entities(
            self._ids(server, a, vlist, empty, "/addressbooks/me/default/gone.vcf")
        )

        assert [e.id.path for e in entities] == [a]

    @pytest.mark.asyncio
    async def test_failed_response_is_skipped(self, server) -> None:
        body = b"""<d:multistatus xmlns:d="DAV:" xmlns:a="urn:ietf:params:xml:ns:carddav">
          <d:response>
            <d:href>/addressbooks/me/default/gone.vcf</d:href>
            <d:status>HTTP/1.1 404 Not Found</d:status>
            <d:propstat>
              <d:prop><a:address-data>BEGIN:VCARD</a:address-data></d:prop>
              <d:status>HTTP/1.1 200 OK</d:status>
            </d:propstat>
          </d:response>
        </d:multistatus>"""
        server.canned[("REPORT", server.collection_url)] = DAVResponse(
            status=207, headers={}, body=body, url=server.collection_url
        )
        fetcher = EntityFetcher(server.collection_url, io=server)
        ids = self._ids(server, "/addressbooks/me/default/gone.vcf")
        assert await fetcher.fetch_entities(ids) == []

    @pytest.mark.asyncio
    async def test_empty_input(self, server) -> None:
        fetcher = EntityFetcher(server.collection_url, io=server)
        assert await fetcher.fetch_entities([]) == []
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_missing_collection_is_raised(self, server) -> None:
        fetcher = EntityFetcher("https://dav.example.com/nowhere/", io=server)
        with pytest.raises(error.NotFoundError):
            await fetcher.fetch_entities(self._ids(server, "/nowhere/a.vcf"))

    @pytest.mark.asyncio
    async def test_server_error_is_raised(self, server) -> None:
        server.canned[("REPORT", server.collection_url)] = DAVResponse(
            status=503, headers={}, body=b""
        )
        fetcher = EntityFetcher(server.collection_url, io=server)
        with pytest.raises(error.ReportError):
            await fetcher.fetch_entities(self._ids(server, "/addressbooks/me/default/a.vcf"))
