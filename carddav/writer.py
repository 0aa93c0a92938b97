import logging
from typing import Optional
from urllib.parse import quote

from .davobject import DAVObject
from .entities import EntityVersion
from .entities import ResourceId
from .lib import error
from .lib.url import URL
from .protocol import DAVResponse
from .protocol import NotFound
from .protocol import Ok
from .protocol import PreconditionFailed
from .protocol import raise_for_outcome
from .versions import normalize_etag

log = logging.getLogger(__name__)


class EntityWriter(DAVObject):
    """
    Creates and updates vCards in one address book collection.

    Updates are conditional on the version the caller last saw, so a
    concurrent modification on the server side is never overwritten.
    """

    def url_for_name(self, suggested_name: str) -> URL:
        """
        The URL a new address object named suggested_name will be
        PUT to.  The name is quoted and gets a .vcf suffix.
        """
        name = suggested_name
        if not name.lower().endswith(".vcf"):
            name += ".vcf"
        return self.url.join(quote(name, safe=""))

    async def create(self, payload: str, suggested_name: str) -> EntityVersion:
        """
        Store a new vCard in the collection.

        Args:
          payload: the vCard text, passed on as it is
          suggested_name: base of the file name, typically the UID

        Returns:
          id and version of the new address object.  The id may differ
          from the requested URL if the server relocated the object.

        Any failure is raised.
        """
        url = self.url_for_name(suggested_name)
        log.debug("Creating entity '%s'", url)

        request = self.protocol.put_request(str(url), payload.encode("utf-8"))
        outcome = await self._execute(request)
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)

        return await self._resolve_version(outcome.response, url)

    async def update(
        self, id: ResourceId, expected_version: str, payload: str
    ) -> Optional[EntityVersion]:
        """
        Replace a vCard, provided the server still has expected_version.

        Returns:
          The new id and version, or None if the object is gone (404)
          or was changed by somebody else (412).  Other failures are raised.

        Raises:
          ValueError: expected_version is empty.  Nothing is sent then.
        """
        if not expected_version:
            raise ValueError("update needs the expected version of %s" % id)

        log.debug("Updating entity '%s'", id)

        request = self.protocol.put_request(
            id.url, payload.encode("utf-8"), etag=expected_version
        )
        outcome = await self._execute(request)
        if isinstance(outcome, (NotFound, PreconditionFailed)):
            log.debug(
                "Update of '%s' refused with status %i", id, outcome.response.status
            )
            return None
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)

        log.debug("Updated entity. Server response headers: '%s'", outcome.response.headers)
        return await self._resolve_version(outcome.response, URL.objectify(id.url))

    async def get_etag(self, url: str) -> str:
        """
        Current version of a single resource, as given by the ETag header
        of a GET.
        """
        request = self.protocol.get_request(url)
        outcome = await self._execute(request)
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)

        etag = normalize_etag(outcome.response.header("ETag"))
        if not etag:
            error.weirdness("no ETag header in GET response", url)
            raise error.GetError(url=url, reason="server did not send an ETag")
        return etag

    async def _resolve_version(
        self, response: DAVResponse, request_url: URL
    ) -> EntityVersion:
        """
        Where the PUT body ended up and in which version.  Both may be
        told by the PUT response; if not, the request URL is it, and the
        version has to be asked for.
        """
        location = response.header("Location")
        if location:
            log.debug("Server sent new location: '%s'", location)
            effective_url = self.url.join(location)
            log.debug("New entity location: '%s'", effective_url)
        else:
            effective_url = request_url

        version = normalize_etag(response.header("ETag"))
        if not version:
            version = await self.get_etag(str(effective_url))

        return EntityVersion(ResourceId.from_url(effective_url), version)
