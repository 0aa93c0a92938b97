"""
This file contains one class, the DAVObject which is the base class for
AddressBookDiscovery, VersionLister, EntityFetcher and EntityWriter.  It
holds the collection URL, the transport and the protocol handler, and
the one method doing the actual round trip.  Library users should not
need to know a lot about the DAVObject class.
"""
import logging
from typing import Any
from typing import Dict
from typing import Optional
from typing import Union

from .compatibility_hints import ServerQuirks
from .io.base import AsyncIOProtocol
from .lib.url import URL
from .protocol import CardDAVProtocol
from .protocol import DAVRequest
from .protocol import Outcome

log = logging.getLogger(__name__)


class DAVObject:
    """
    Base class for the CardDAV components.  Every component works on
    one URL (an address book collection, or the server root for the
    discovery) and holds no state besides its configuration, so
    concurrent calls on the same object are fine.
    """

    def __init__(
        self,
        url: Union[str, URL],
        io: AsyncIOProtocol,
        protocol: Optional[CardDAVProtocol] = None,
        quirks: Union[ServerQuirks, Dict[str, Any], None] = None,
    ) -> None:
        """
        Args:
          url: Absolute URL of the collection (or server)
          io: The transport executing the requests
          protocol: Request builder; one without credentials is made if not given
          quirks: ServerQuirks or a dict with quirk settings
        """
        self.url = URL.objectify(url)
        if not self.url.scheme:
            raise ValueError("an absolute URL is needed, got %s" % url)
        self.io = io
        self.protocol = protocol or CardDAVProtocol(str(self.url))
        self.quirks = (
            quirks if isinstance(quirks, ServerQuirks) else ServerQuirks(quirks)
        )

    @property
    def collection_path(self) -> str:
        """The percent-decoded path of self.url"""
        return self.url.decoded_path()

    async def _execute(self, request: DAVRequest) -> Outcome:
        """
        Run one request through the transport and classify the result.

        Transport exceptions and cancellation are passed on untouched.
        """
        response = await self.io.execute(request)
        return self.protocol.classify(response)

    def __repr__(self) -> str:
        return "%s(%s)" % (self.__class__.__name__, self.url)
