import logging
from typing import Iterable
from typing import List

from .davobject import DAVObject
from .elements import carddav
from .entities import EntityWithPayload
from .entities import ResourceId
from .protocol import Ok
from .protocol import raise_for_outcome
from .versions import is_unparseable

log = logging.getLogger(__name__)


class EntityFetcher(DAVObject):
    """
    Downloads vCards from one address book collection.
    """

    async def fetch_entities(self, ids: Iterable[ResourceId]) -> List[EntityWithPayload]:
        """
        Fetch the vCards of the given address objects in one
        addressbook-multiget REPORT.

        Objects the server doesn't deliver address-data for are left
        out.  There is no special treatment of a 404 here; the ids come
        from a version listing of the same collection, so a missing
        collection is an error.
        """
        ids = list(ids)
        if not ids:
            return []

        for id in ids:
            log.debug("Requesting: '%s'", id)

        request = self.protocol.addressbook_multiget_request(
            str(self.url), [x.original_path for x in ids], include_data=True
        )
        outcome = await self._execute(request)
        if not isinstance(outcome, Ok):
            raise_for_outcome(outcome, request)

        document = self.protocol.parse_multistatus(outcome.response, request)

        entities = []
        for entry in document.responses:
            data = entry.property(carddav.AddressData.tag)
            if entry.href is None or not entry.ok or not data:
                continue
            if is_unparseable(entry, self.quirks):
                log.debug("skipping %s, content type not supported", entry.href)
                continue
            log.debug("Got: '%s'", entry.href)
            entities.append(
                EntityWithPayload(ResourceId.from_href(entry.href, document.base_url), data)
            )
        return entities
