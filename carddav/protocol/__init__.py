"""
The Sans-I/O part of the library: CardDAV requests and responses as
plain data.

- types: DAVRequest, DAVResponse, the tagged outcomes and the parsed
  multistatus document
- xml_builders: request bodies
- xml_parsers: the multistatus parser
- operations: CardDAVProtocol, tying the above together

Nothing in here touches the network; feeding a DAVRequest to a
transport and the DAVResponse back to CardDAVProtocol is up to the
caller (the components in carddav do this through carddav.io).
"""

from .types import (
    DAVMethod,
    DAVRequest,
    DAVResponse,
    DAVResponseEntry,
    Failed,
    MultistatusDocument,
    NotFound,
    Ok,
    Outcome,
    PreconditionFailed,
)
from .xml_builders import build_addressbook_multiget_body, build_propfind_body
from .xml_parsers import parse_multistatus
from .operations import VCARD_CONTENT_TYPE, CardDAVProtocol, raise_for_outcome

__all__ = [
    "DAVMethod",
    "DAVRequest",
    "DAVResponse",
    "DAVResponseEntry",
    "MultistatusDocument",
    "Ok",
    "NotFound",
    "PreconditionFailed",
    "Failed",
    "Outcome",
    "build_addressbook_multiget_body",
    "build_propfind_body",
    "parse_multistatus",
    "VCARD_CONTENT_TYPE",
    "CardDAVProtocol",
    "raise_for_outcome",
]
