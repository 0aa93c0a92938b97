"""
High-level async client for one address book collection.

AsyncCardDAVClient wires the protocol handler, the aiohttp transport and
the four components together, so a synchronization engine needs only one
object per configured address book:

    async with AsyncCardDAVClient(
        "https://dav.example.com/addressbooks/me/default/",
        username="me",
        password="secret",
    ) as client:
        versions = await client.list_all_versions()
        contacts = await client.fetch_entities([v.id for v in versions])
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from carddav.compatibility_hints import ServerQuirks
from carddav.discovery import AddressBookDiscovery
from carddav.elements import carddav
from carddav.entities import (
    AddressBookDescriptor,
    EntityVersion,
    EntityWithPayload,
    ResourceId,
)
from carddav.fetcher import EntityFetcher
from carddav.io import AsyncIO, AsyncIOProtocol
from carddav.lib.url import URL
from carddav.protocol import CardDAVProtocol, NotFound, Ok, raise_for_outcome
from carddav.versions import VersionLister
from carddav.writer import EntityWriter

log = logging.getLogger(__name__)


class AsyncCardDAVClient:
    """
    Asynchronous CardDAV client for one address book collection.

    Attributes:
        discovery: AddressBookDiscovery, starting at the configured URL
        versions: VersionLister for the collection
        fetcher: EntityFetcher for the collection
        writer: EntityWriter for the collection
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        quirks: Union[ServerQuirks, Dict[str, Any], None] = None,
        io: Optional[AsyncIOProtocol] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        huge_tree: bool = False,
    ):
        """
        Initialize the client.

        Args:
            url: Address book collection URL (or just the server URL if
                the client is only used for discovery)
            username: Username for Basic authentication
            password: Password for Basic authentication
            quirks: Server workarounds, see carddav.compatibility_hints
            io: Transport to use; an aiohttp based one is created (and
                closed together with the client) if not given
            timeout: Request timeout in seconds
            verify_ssl: Verify SSL certificates
            huge_tree: Allow parsing very large XML documents
        """
        self.url = URL.objectify(url)
        self.protocol = CardDAVProtocol(
            base_url=str(self.url),
            username=username,
            password=password,
            huge_tree=huge_tree,
        )
        self._owns_io = io is None
        self.io = io or AsyncIO(timeout=timeout, verify_ssl=verify_ssl)
        self.quirks = (
            quirks if isinstance(quirks, ServerQuirks) else ServerQuirks(quirks)
        )

        component_args = dict(
            url=self.url, io=self.io, protocol=self.protocol, quirks=self.quirks
        )
        self.discovery = AddressBookDiscovery(**component_args)
        self.versions = VersionLister(**component_args)
        self.fetcher = EntityFetcher(**component_args)
        self.writer = EntityWriter(**component_args)

    async def close(self) -> None:
        """Close the transport if we created it."""
        if self._owns_io:
            await self.io.close()

    async def __aenter__(self) -> "AsyncCardDAVClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def _execute(self, request):
        response = await self.io.execute(request)
        return self.protocol.classify(response)

    # Capability probes

    async def supports_address_book_access(self) -> bool:
        """
        True if the server announces CardDAV support (the
        "addressbook" compliance class in the DAV header of an
        OPTIONS response, RFC 6352 section 6.1).
        """
        request = self.protocol.options_request(str(self.url))
        outcome = await self._execute(request)
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)
        dav_header = outcome.response.header("DAV") or ""
        classes = [x.strip().lower() for x in dav_header.split(",")]
        return "addressbook" in classes

    async def is_resource_address_book(self) -> bool:
        """
        True if the configured URL is an address book collection.
        """
        request = self.protocol.propfind_request(str(self.url), ["resourcetype"], depth=0)
        outcome = await self._execute(request)
        if isinstance(outcome, NotFound):
            return False
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)
        document = self.protocol.parse_multistatus(outcome.response, request)
        return any(
            entry.has_resource_type(carddav.AddressBook.tag)
            for entry in document.responses
        )

    # Forwarding to the components

    async def discover_address_books(
        self, use_well_known_url: bool = False
    ) -> List[AddressBookDescriptor]:
        return await self.discovery.discover_address_books(use_well_known_url)

    async def list_all_versions(self) -> List[EntityVersion]:
        return await self.versions.list_all_versions()

    async def list_versions(self, ids: Iterable[ResourceId]) -> List[EntityVersion]:
        return await self.versions.list_versions(ids)

    async def fetch_entities(self, ids: Iterable[ResourceId]) -> List[EntityWithPayload]:
        return await self.fetcher.fetch_entities(ids)

    async def create(self, payload: str, suggested_name: str) -> EntityVersion:
        return await self.writer.create(payload, suggested_name)

    async def update(
        self, id: ResourceId, expected_version: str, payload: str
    ) -> Optional[EntityVersion]:
        return await self.writer.update(id, expected_version, payload)
