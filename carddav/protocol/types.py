"""
Plain data passed between the protocol layer and the transports.

Requests and responses are frozen dataclasses, so they can be logged,
compared in tests and handed around between tasks freely.
"""

from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Optional, Union

from lxml.etree import _Element

from carddav.elements import dav


class DAVMethod(Enum):
    """The HTTP methods the CardDAV components use"""

    GET = "GET"
    PUT = "PUT"
    PROPFIND = "PROPFIND"
    REPORT = "REPORT"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class DAVRequest:
    """
    One HTTP request, as built by CardDAVProtocol.

    Attributes:
        method: DAVMethod
        url: absolute URL
        headers: header name -> value
        body: None for GET and OPTIONS
    """

    method: DAVMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class DAVResponse:
    """
    One HTTP response, as returned by the transport.

    Attributes:
        status: HTTP status code
        headers: header name -> value, see header() for lookups
        body: the raw body
        url: the URL the response was finally served from (after
            redirects).  Empty if the transport doesn't know.
    """

    status: int
    headers: dict[str, str]
    body: bytes
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def reason(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown"

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup, None if absent"""
        lname = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lname:
                return value
        return None


## Tagged outcomes.  CardDAVProtocol.classify() sorts every response into
## one of these, and the components decide per operation which of them
## are expected.


@dataclass(frozen=True)
class Ok:
    response: DAVResponse


@dataclass(frozen=True)
class NotFound:
    response: DAVResponse


@dataclass(frozen=True)
class PreconditionFailed:
    response: DAVResponse


@dataclass(frozen=True)
class Failed:
    response: DAVResponse

    @property
    def status(self) -> int:
        return self.response.status


Outcome = Union[Ok, NotFound, PreconditionFailed, Failed]


@dataclass(frozen=True)
class DAVResponseEntry:
    """
    One DAV:response element of a multistatus document.

    Attributes:
        href: The href text exactly as the server sent it (None if absent)
        status: HTTP status of the response element, 200 if it has none
        properties: property tag -> property element, taken from the
            propstats with a 2xx status
    """

    href: Optional[str]
    status: int = 200
    properties: dict[str, _Element] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def property(self, tag: str) -> Optional[str]:
        """
        Text content of a property, None if the property is absent.
        An empty property gives an empty string.
        """
        elem = self.properties.get(tag)
        if elem is None:
            return None
        return "".join(elem.itertext())

    def hrefs(self, tag: str) -> list[str]:
        """Texts of the DAV:href children of a property (like addressbook-home-set)"""
        elem = self.properties.get(tag)
        if elem is None:
            return []
        return [x.text.strip() for x in elem.iter(dav.Href.tag) if x.text and x.text.strip()]

    def has_resource_type(self, tag: str) -> bool:
        resourcetype = self.properties.get(dav.ResourceType.tag)
        if resourcetype is None:
            return False
        return any(child.tag == tag for child in resourcetype)


@dataclass(frozen=True)
class MultistatusDocument:
    """
    Parsed 207 Multi-Status response.

    Attributes:
        base_url: URL the document was served from, used to resolve
            server-relative hrefs
        responses: the DAV:response entries in document order
    """

    base_url: str
    responses: tuple[DAVResponseEntry, ...] = ()
