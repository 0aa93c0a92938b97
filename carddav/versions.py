"""
Listing the versions (ETags) of the address objects in a collection.

The extraction policy is shared by the depth 1 PROPFIND over the whole
collection and by the addressbook-multiget REPORT for a subset of it.
"""
import logging
from typing import Iterable
from typing import List
from typing import Optional

from .compatibility_hints import ServerQuirks
from .davobject import DAVObject
from .elements import dav
from .entities import EntityVersion
from .entities import ResourceId
from .lib import error
from .lib.url import URL
from .protocol import MultistatusDocument
from .protocol import NotFound
from .protocol import Ok
from .protocol import raise_for_outcome
from .protocol.types import DAVResponseEntry

log = logging.getLogger(__name__)

VERSION_PROPS = ["getetag", "getcontenttype"]


def normalize_etag(etag: Optional[str]) -> str:
    """
    Bring an ETag into its quoted form, as it's sent back in If-Match.

    Some servers deliver the getetag property without the quotes
    mandated by RFC 7232.  Weak ETags are left as they are.  An empty
    ETag (also an empty quoted one) gives an empty string.
    """
    if etag is None:
        return ""
    etag = etag.strip()
    if not etag or etag == '""':
        return ""
    if etag.startswith('"') or etag.startswith('W/"'):
        return etag
    return '"%s"' % etag


def media_type(content_type: Optional[str]) -> str:
    """ "text/vcard; charset=utf-8" -> "text/vcard" """
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_unparseable(entry: DAVResponseEntry, quirks: ServerQuirks) -> bool:
    content_type = media_type(entry.property(dav.GetContentType.tag))
    return content_type in quirks.unparseable_content_types


def same_path(href_path: str, collection_path: str) -> bool:
    """Path comparison not caring about a trailing slash"""
    return href_path.rstrip("/") == collection_path.rstrip("/")


def extract_versions(
    document: MultistatusDocument,
    collection_path: str,
    quirks: ServerQuirks,
) -> List[EntityVersion]:
    """
    Pick the address object versions out of a multistatus document.

    Args:
        document: parsed PROPFIND or REPORT response
        collection_path: percent-decoded path of the collection the
            request went to; the collection itself is not an address object
        quirks: server workarounds to apply

    Returns:
        list of EntityVersion, in document order
    """
    versions: List[EntityVersion] = []
    for entry in document.responses:
        if entry.href is None:
            continue
        ## a multiget answers unknown hrefs with a 404 response element
        if not entry.ok:
            log.debug("'%s': status %i", entry.href, entry.status)
            continue
        raw_etag = entry.property(dav.GetEtag.tag)
        if raw_etag is None:
            continue

        etag = normalize_etag(raw_etag)
        ## the directory is also included in the list.  Some servers
        ## give it the etag '"None"', some an empty one, and some a
        ## real etag - so the href has to be checked as well
        if not etag:
            continue
        if quirks.none_etag_marks_collection and etag.lower() == '"none"':
            continue
        if same_path(URL.objectify(entry.href).decoded_path(), collection_path):
            continue
        if is_unparseable(entry, quirks):
            log.debug("skipping %s, content type not supported", entry.href)
            continue

        log.debug("'%s': '%s'", entry.href, etag)
        versions.append(
            EntityVersion(ResourceId.from_href(entry.href, document.base_url), etag)
        )
    return versions


class VersionLister(DAVObject):
    """
    Lists the current versions of the address objects in one collection.
    """

    async def list_all_versions(self) -> List[EntityVersion]:
        """
        Versions of every address object in the collection.

        A collection that doesn't exist (404) is reported as empty.
        """
        request = self.protocol.propfind_request(str(self.url), VERSION_PROPS, depth=1)
        outcome = await self._execute(request)
        if isinstance(outcome, NotFound):
            return []
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)

        document = self.protocol.parse_multistatus(outcome.response, request)
        return extract_versions(document, self.collection_path, self.quirks)

    async def list_versions(self, ids: Iterable[ResourceId]) -> List[EntityVersion]:
        """
        Versions of the given address objects.

        Ids the server doesn't know are simply missing in the result.
        The result never contains an id that wasn't asked for, and no
        id more than once.
        """
        ids = list(ids)
        if not ids:
            return []

        request = self.protocol.addressbook_multiget_request(
            str(self.url), [x.original_path for x in ids]
        )
        outcome = await self._execute(request)
        if isinstance(outcome, NotFound):
            return []
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)

        document = self.protocol.parse_multistatus(outcome.response, request)
        requested = set(ids)
        seen = set()
        versions = []
        for version in extract_versions(document, self.collection_path, self.quirks):
            if version.id not in requested:
                error.weirdness("multiget returned unrequested href", version.id.url)
                continue
            if version.id in seen:
                error.weirdness("multiget returned href twice", version.id.url)
                continue
            seen.add(version.id)
            versions.append(version)
        return versions
