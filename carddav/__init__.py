#!/usr/bin/env python
import logging

__version__ = "0.1.0"

from .client import AsyncCardDAVClient
from .compatibility_hints import ServerQuirks
from .discovery import AddressBookDiscovery
from .entities import AddressBookDescriptor
from .entities import EntityVersion
from .entities import EntityWithPayload
from .entities import ResourceId
from .fetcher import EntityFetcher
from .versions import VersionLister
from .writer import EntityWriter

# Silence notification of no default logging handler
log = logging.getLogger("carddav")
log.addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "AsyncCardDAVClient",
    "AddressBookDiscovery",
    "VersionLister",
    "EntityFetcher",
    "EntityWriter",
    "ResourceId",
    "EntityVersion",
    "EntityWithPayload",
    "AddressBookDescriptor",
    "ServerQuirks",
]
