#!/usr/bin/env python
"""
Finding the address books of the authenticated user.

The discovery follows RFC 6352 section 7.1 and RFC 5397:

1. PROPFIND current-user-principal on the server URL, or on the
   well-known URI from RFC 6764 (/.well-known/carddav)
2. PROPFIND addressbook-home-set on the principal
3. PROPFIND depth 1 on every home set, picking the children having the
   addressbook resource type

Quite some servers don't implement the whole chain, or implement it on
different URLs than the configured one.  Such servers typically answer
404 or 405 somewhere on the way, or send something that isn't XML at
all (like a HTML login page).  That is reported as "no address books",
not as an error.
"""
import logging
from typing import List
from typing import Optional

from .davobject import DAVObject
from .elements import carddav
from .elements import dav
from .entities import AddressBookDescriptor
from .lib import error
from .lib.url import URL
from .protocol import MultistatusDocument
from .protocol import Ok
from .protocol import raise_for_outcome

log = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/carddav"


class AddressBookDiscovery(DAVObject):
    """
    Resolves the address book collections visible to the principal
    the transport is authenticated as.  self.url is the configured
    server URL.
    """

    @property
    def well_known_url(self) -> URL:
        return URL(str(self.url.authority()) + WELL_KNOWN_PATH)

    async def discover_address_books(
        self, use_well_known_url: bool = False
    ) -> List[AddressBookDescriptor]:
        """
        Args:
          use_well_known_url: start the discovery at
            <scheme>://<authority>/.well-known/carddav instead of the
            configured URL

        Returns:
          all address books found in all home sets.  Empty if the server
          doesn't support the discovery.
        """
        root = self.well_known_url if use_well_known_url else self.url
        try:
            return await self._discover(root)
        except (
            error.NotFoundError,
            error.MethodNotAllowedError,
            error.MalformedResponseError,
        ) as e:
            log.info("no address books found below %s: %s", root, e)
            return []

    async def _discover(self, root: URL) -> List[AddressBookDescriptor]:
        principal_url = await self.current_user_principal_url(root)
        if principal_url is None:
            log.debug("no current-user-principal at %s", root)
            return []

        home_set_document = await self._propfind(
            principal_url, ["addressbook-home-set"], depth=0
        )
        home_set_hrefs = []
        for entry in home_set_document.responses:
            home_set_hrefs.extend(entry.hrefs(carddav.AddressBookHomeSet.tag))

        authority = URL.objectify(home_set_document.base_url).authority()
        addressbooks: List[AddressBookDescriptor] = []
        for href in home_set_hrefs:
            addressbooks.extend(await self.list_address_books(authority.join(href)))
        return addressbooks

    async def current_user_principal_url(self, root: URL) -> Optional[URL]:
        """
        The principal URL (RFC 5397), None if the server doesn't tell.
        """
        document = await self._propfind(root, ["current-user-principal"], depth=0)
        for entry in document.responses:
            hrefs = entry.hrefs(dav.CurrentUserPrincipal.tag)
            if hrefs:
                return URL.objectify(document.base_url).join(hrefs[0])
        return None

    async def list_address_books(self, home_set_url: URL) -> List[AddressBookDescriptor]:
        """
        The address book collections directly below a home set.
        """
        document = await self._propfind(
            home_set_url, ["resourcetype", "displayname"], depth=1
        )
        base = URL.objectify(document.base_url)
        addressbooks = []
        for entry in document.responses:
            display_name = entry.property(dav.DisplayName.tag)
            if entry.href is None or display_name is None:
                continue
            if entry.has_resource_type(carddav.AddressBook.tag):
                addressbooks.append(
                    AddressBookDescriptor(str(base.join(entry.href)), display_name)
                )
        return addressbooks

    async def _propfind(self, url: URL, props: List[str], depth: int) -> MultistatusDocument:
        request = self.protocol.propfind_request(str(url), props, depth=depth)
        outcome = await self._execute(request)
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)
        return self.protocol.parse_multistatus(outcome.response, request)
