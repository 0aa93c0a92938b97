"""
An in-memory CardDAV server to run the components against.

It implements just enough of RFC 6352 for the tests: the discovery
chain, depth 1 PROPFIND on the address book, addressbook-multiget,
conditional PUT, GET and OPTIONS.  It is used in place of the aiohttp
transport, i.e. it is an AsyncIOProtocol.
"""
import asyncio
from typing import Dict, List, Optional, Set, Tuple
from urllib.parse import quote, unquote, urlparse
from xml.sax.saxutils import escape

import pytest
from lxml import etree

from carddav import AsyncCardDAVClient
from carddav.protocol import DAVRequest, DAVResponse

D = "{DAV:}"
A = "{urn:ietf:params:xml:ns:carddav}"


class FakeCardDAVServer:
    def __init__(
        self,
        host: str = "https://dav.example.com",
        collection_path: str = "/addressbooks/me/default/",
        collection_etag: Optional[str] = '"None"',
    ) -> None:
        self.host = host
        self.collection_path = collection_path
        self.principal_path = "/principals/me/"
        self.home_set_path = "/addressbooks/me/"
        self.collection_etag = collection_etag
        ## path -> (etag, vcard, content type)
        self.contacts: Dict[str, Tuple[str, str, str]] = {}
        self.requests: List[DAVRequest] = []
        self.send_etag_on_put = True
        self.relocate_to: Optional[str] = None
        self.canned: Dict[Tuple[str, str], DAVResponse] = {}
        ## (method, url) of requests that never get an answer
        self.stalled: Set[Tuple[str, str]] = set()
        self.stall_started = asyncio.Event()
        self._counter = 0

    @property
    def collection_url(self) -> str:
        return self.host + self.collection_path

    def add_contact(
        self, name: str, vcard: str, content_type: str = "text/vcard; charset=utf-8"
    ) -> str:
        path = self.collection_path + name
        self.contacts[path] = (self._next_etag(), vcard, content_type)
        return path

    def _next_etag(self) -> str:
        self._counter += 1
        return '"etag-%i"' % self._counter

    def requests_with_method(self, method: str) -> List[DAVRequest]:
        return [x for x in self.requests if x.method.value == method]

    async def execute(self, request: DAVRequest) -> DAVResponse:
        self.requests.append(request)
        if (request.method.value, request.url) in self.stalled:
            self.stall_started.set()
            await asyncio.Event().wait()
        canned = self.canned.get((request.method.value, request.url))
        if canned is not None:
            return canned
        path = unquote(urlparse(request.url).path)
        handler = getattr(self, "_" + request.method.value.lower())
        return handler(request, path)

    async def close(self) -> None:
        pass

    # Method handlers

    def _options(self, request, path):
        return DAVResponse(
            status=200,
            headers={"DAV": "1, 2, 3, addressbook", "Allow": "OPTIONS, GET, PUT, PROPFIND, REPORT"},
            body=b"",
            url=request.url,
        )

    def _propfind(self, request, path):
        depth = request.headers.get("Depth", "0")
        props = [x.tag for x in etree.fromstring(request.body).find(D + "prop")]
        entries = []
        if path in ("/", "/.well-known/carddav") and D + "current-user-principal" in props:
            entries.append(
                (path, "<D:current-user-principal><D:href>%s</D:href></D:current-user-principal>" % self.principal_path)
            )
        elif path == self.principal_path:
            entries.append(
                (path, "<A:addressbook-home-set><D:href>%s</D:href></A:addressbook-home-set>" % self.home_set_path)
            )
        elif path == self.home_set_path:
            entries.append((path, "<D:resourcetype><D:collection/></D:resourcetype><D:displayname>Home</D:displayname>"))
            if depth != "0":
                entries.append(
                    (
                        self.collection_path,
                        "<D:resourcetype><D:collection/><A:addressbook/></D:resourcetype><D:displayname>Contacts</D:displayname>",
                    )
                )
        elif path == self.collection_path:
            if depth == "0":
                entries.append((path, "<D:resourcetype><D:collection/><A:addressbook/></D:resourcetype>"))
            else:
                if self.collection_etag is not None:
                    entries.append((path, "<D:getetag>%s</D:getetag>" % escape(self.collection_etag)))
                for contact_path, (etag, _, content_type) in self.contacts.items():
                    entries.append((contact_path, self._version_props(etag, content_type)))
        else:
            return self._not_found(request)
        return self._multistatus(request, entries)

    def _report(self, request, path):
        if path != self.collection_path:
            return self._not_found(request)
        root = etree.fromstring(request.body)
        with_data = root.find(".//" + A + "address-data") is not None
        entries = []
        for href in root.findall(D + "href"):
            contact_path = unquote(href.text)
            if contact_path not in self.contacts:
                entries.append((href.text, None))
                continue
            etag, vcard, content_type = self.contacts[contact_path]
            props = self._version_props(etag, content_type)
            if with_data:
                props += "<A:address-data>%s</A:address-data>" % escape(vcard, {"\r": "&#13;"})
            entries.append((href.text, props))
        return self._multistatus(request, entries)

    def _put(self, request, path):
        if_match = request.headers.get("If-Match")
        if if_match is not None:
            if path not in self.contacts:
                return self._not_found(request)
            if self.contacts[path][0] != if_match:
                return DAVResponse(status=412, headers={}, body=b"", url=request.url)
        status = 204 if path in self.contacts else 201
        if self.relocate_to:
            path = self.relocate_to
        etag = self._next_etag()
        self.contacts[path] = (etag, request.body.decode("utf-8"), request.headers["Content-Type"])
        headers = {}
        if self.send_etag_on_put:
            headers["ETag"] = etag
        if self.relocate_to:
            headers["Location"] = quote(self.relocate_to)
        return DAVResponse(status=status, headers=headers, body=b"", url=request.url)

    def _get(self, request, path):
        if path not in self.contacts:
            return self._not_found(request)
        etag, vcard, content_type = self.contacts[path]
        return DAVResponse(
            status=200,
            headers={"ETag": etag, "Content-Type": content_type},
            body=vcard.encode("utf-8"),
            url=request.url,
        )

    # Response helpers

    def _version_props(self, etag, content_type):
        return "<D:getetag>%s</D:getetag><D:getcontenttype>%s</D:getcontenttype>" % (
            escape(etag),
            escape(content_type),
        )

    def _not_found(self, request):
        return DAVResponse(status=404, headers={}, body=b"", url=request.url)

    def _multistatus(self, request, entries):
        parts = ['<?xml version="1.0" encoding="utf-8"?>']
        parts.append('<D:multistatus xmlns:D="DAV:" xmlns:A="urn:ietf:params:xml:ns:carddav">')
        for href, props in entries:
            parts.append("<D:response><D:href>%s</D:href>" % escape(quote(href) if "%" not in href else href))
            if props is None:
                parts.append("<D:status>HTTP/1.1 404 Not Found</D:status>")
            else:
                parts.append(
                    "<D:propstat><D:prop>%s</D:prop><D:status>HTTP/1.1 200 OK</D:status></D:propstat>" % props
                )
            parts.append("</D:response>")
        parts.append("</D:multistatus>")
        return DAVResponse(
            status=207,
            headers={"Content-Type": "application/xml; charset=utf-8"},
            body="".join(parts).encode("utf-8"),
            url=request.url,
        )


@pytest.fixture
def server() -> FakeCardDAVServer:
    return FakeCardDAVServer()


@pytest.fixture
def client(server: FakeCardDAVServer) -> AsyncCardDAVClient:
    return AsyncCardDAVClient(
        server.collection_url, username="me", password="secret", io=server
    )
