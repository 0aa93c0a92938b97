"""
Value types handed to the synchronization engine.

All of them are immutable and created fresh on every round trip; the
server is the source of truth, so nothing here should be kept around as
a long-lived reference to a remote contact.
"""
from dataclasses import dataclass
from dataclasses import field
from typing import Union
from urllib.parse import unquote

from carddav.lib.url import URL


@dataclass(frozen=True)
class ResourceId:
    """
    Identity of a remote address object.

    Attributes:
        original_path: absolute path exactly as the server sent it
            (percent-encoded).  This is what goes back into multiget
            hrefs.
        url: the resolved absolute URL, used for PUT and GET

    Two ids are equal when their percent-decoded paths are equal, so
    "/ab/j%C3%B8rn.vcf" and "/ab/jørn.vcf" refer to the same contact.
    """

    original_path: str = field(compare=False)
    url: str = field(compare=False)
    path: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", unquote(self.original_path))

    @classmethod
    def from_url(cls, url: Union[str, URL]) -> "ResourceId":
        """From a raw absolute URL, i.e. a Location header or a request URL"""
        url = URL.objectify(url)
        return cls(original_path=url.path or "/", url=str(url))

    @classmethod
    def from_href(cls, href: str, base_url: Union[str, URL]) -> "ResourceId":
        """From a DAV:href, which may be a server-relative path or a full URL"""
        absolute = URL.objectify(base_url).join(href.strip())
        return cls(original_path=absolute.path or "/", url=str(absolute))

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class EntityVersion:
    """An address object id with its current version (the quoted ETag)"""

    id: ResourceId
    version: str


@dataclass(frozen=True)
class EntityWithPayload:
    """An address object id with its vCard text"""

    id: ResourceId
    payload: str


@dataclass(frozen=True)
class AddressBookDescriptor:
    url: str
    display_name: str
